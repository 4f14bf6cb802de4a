import pytest

from sra_harvester.sra_xml import DecodeError, parse_package_set, parse_search_result


def test_parse_search_result(esearch_xml):
    result = parse_search_result(esearch_xml)
    assert result.count == 3
    assert result.ids == ["35012345", "35012346", "35012347"]


def test_parse_search_result_empty():
    result = parse_search_result(b"<eSearchResult><Count>0</Count><IdList/></eSearchResult>")
    assert result.count == 0
    assert result.ids == []


def test_parse_package_set(package_set_xml):
    package_set = parse_package_set(package_set_xml)
    assert len(package_set.packages) == 2

    pkg = package_set.packages[0]
    assert pkg.experiment.accession == "SRX24000001"
    assert pkg.experiment.title.startswith("Amplicon sequencing")
    assert pkg.experiment.library.strategy == "AMPLICON"
    assert pkg.experiment.library.selection == "PCR"
    assert pkg.experiment.study_ids[0].namespace == "BioProject"
    # decoding alone does not resolve the BioProject
    assert pkg.experiment.bioproject == ""

    assert pkg.sample.accession == "SRS20000001"
    assert pkg.sample.identifiers[0].value == "SAMN40000001"
    assert pkg.sample.attributes[0].tag == "Collection_Date"

    assert pkg.platform.name == "ILLUMINA"
    assert pkg.platform.instrument_model == "Illumina NovaSeq 6000"
    assert pkg.organization.name == "Wisconsin State Laboratory of Hygiene"
    assert pkg.organization.type == "center"
    assert pkg.release_date == "2024-10-21"
    assert pkg.load_date == "2024-10-19"

    assert [r.accession for r in pkg.runs] == ["SRR29000001", "SRR29000002"]
    assert pkg.runs[0].total_spots == "812345"
    assert pkg.runs[0].total_bases == "245000000"
    assert pkg.runs[0].release_date == "2024-10-20 08:15:02"
    assert pkg.runs[1].load_date == ""


def test_values_are_decoded_verbatim():
    xml = b"""<EXPERIMENT_PACKAGE_SET><EXPERIMENT_PACKAGE>
      <SAMPLE><SAMPLE_ATTRIBUTES>
        <SAMPLE_ATTRIBUTE><TAG>geo_loc_name</TAG><VALUE> USA: Ohio </VALUE></SAMPLE_ATTRIBUTE>
      </SAMPLE_ATTRIBUTES></SAMPLE>
      <RUN_SET><RUN accession="SRR1" total_spots=" 42"/></RUN_SET>
    </EXPERIMENT_PACKAGE></EXPERIMENT_PACKAGE_SET>"""
    pkg = parse_package_set(xml).packages[0]
    assert pkg.sample.attributes[0].value == " USA: Ohio "
    assert pkg.runs[0].total_spots == " 42"


def test_parse_package_missing_sections(package_set_xml):
    pkg = parse_package_set(package_set_xml).packages[1]
    assert pkg.organization is None
    assert pkg.platform.name == ""
    assert pkg.experiment.title == ""
    assert pkg.release_date == ""


def test_platform_on_package_level():
    xml = b"""<EXPERIMENT_PACKAGE_SET><EXPERIMENT_PACKAGE>
      <PLATFORM><OXFORD_NANOPORE><INSTRUMENT_MODEL>MinION</INSTRUMENT_MODEL></OXFORD_NANOPORE></PLATFORM>
    </EXPERIMENT_PACKAGE></EXPERIMENT_PACKAGE_SET>"""
    pkg = parse_package_set(xml).packages[0]
    assert pkg.platform.name == "OXFORD_NANOPORE"
    assert pkg.platform.instrument_model == "MinION"
    assert pkg.runs == []


def test_parse_empty_package_set():
    assert parse_package_set(b"<EXPERIMENT_PACKAGE_SET/>").packages == []


def test_malformed_xml_raises_decode_error():
    with pytest.raises(DecodeError):
        parse_package_set(b"<EXPERIMENT_PACKAGE_SET><EXPERIMENT_PACKAGE>")


def test_unexpected_root_raises_decode_error():
    with pytest.raises(DecodeError, match="ERROR"):
        parse_package_set(b"<ERROR>API rate limit exceeded</ERROR>")
