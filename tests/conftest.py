"""Shared fixtures for sra-harvester tests."""

import pytest
import requests

from sra_harvester.eutils import EutilsClient
from sra_harvester.rate_limiter import RateLimiter


@pytest.fixture
def fast_limiter():
    """Rate limiter that never blocks."""
    return RateLimiter(None)


@pytest.fixture
def session():
    return requests.Session()


@pytest.fixture
def client(session, fast_limiter):
    return EutilsClient(session, fast_limiter)


# --- Mock API response payloads ---

@pytest.fixture
def esearch_xml():
    return b"""<?xml version="1.0" encoding="UTF-8" ?>
<!DOCTYPE eSearchResult PUBLIC "-//NLM//DTD esearch 20060628//EN" "https://eutils.ncbi.nlm.nih.gov/eutils/dtd/20060628/esearch.dtd">
<eSearchResult>
  <Count>3</Count>
  <RetMax>3</RetMax>
  <RetStart>0</RetStart>
  <IdList>
    <Id>35012345</Id>
    <Id>35012346</Id>
    <Id>35012347</Id>
  </IdList>
</eSearchResult>
"""


@pytest.fixture
def package_set_xml():
    """Realistic EFetch response: one wastewater package with two runs,
    one package with a bare sample and no organization."""
    return b"""<?xml version="1.0" encoding="UTF-8" ?>
<EXPERIMENT_PACKAGE_SET>
  <EXPERIMENT_PACKAGE>
    <EXPERIMENT accession="SRX24000001" alias="ww_lib_01">
      <IDENTIFIERS><PRIMARY_ID>SRX24000001</PRIMARY_ID></IDENTIFIERS>
      <TITLE>Amplicon sequencing of SARS-CoV-2 in wastewater</TITLE>
      <STUDY_REF accession="SRP500001">
        <IDENTIFIERS>
          <PRIMARY_ID>SRP500001</PRIMARY_ID>
          <EXTERNAL_ID namespace="BioProject"> PRJNA748354 </EXTERNAL_ID>
        </IDENTIFIERS>
      </STUDY_REF>
      <DESIGN>
        <DESIGN_DESCRIPTION>ARTIC v4.1</DESIGN_DESCRIPTION>
        <LIBRARY_DESCRIPTOR>
          <LIBRARY_NAME>ww_lib_01</LIBRARY_NAME>
          <LIBRARY_STRATEGY>AMPLICON</LIBRARY_STRATEGY>
          <LIBRARY_SOURCE>METATRANSCRIPTOMIC</LIBRARY_SOURCE>
          <LIBRARY_SELECTION>PCR</LIBRARY_SELECTION>
        </LIBRARY_DESCRIPTOR>
      </DESIGN>
      <PLATFORM><ILLUMINA><INSTRUMENT_MODEL>Illumina NovaSeq 6000</INSTRUMENT_MODEL></ILLUMINA></PLATFORM>
    </EXPERIMENT>
    <Organization type="center">
      <Name abbr="WSLH">Wisconsin State Laboratory of Hygiene</Name>
    </Organization>
    <SAMPLE accession="SRS20000001" alias="ww_sample_01">
      <IDENTIFIERS>
        <PRIMARY_ID>SRS20000001</PRIMARY_ID>
        <EXTERNAL_ID namespace="BioSample">SAMN40000001</EXTERNAL_ID>
      </IDENTIFIERS>
      <TITLE>Influent sample 01</TITLE>
      <SAMPLE_ATTRIBUTES>
        <SAMPLE_ATTRIBUTE><TAG>Collection_Date</TAG><VALUE>2024-10-01</VALUE></SAMPLE_ATTRIBUTE>
        <SAMPLE_ATTRIBUTE><TAG>geo_loc_name</TAG><VALUE>USA: Wisconsin, Madison</VALUE></SAMPLE_ATTRIBUTE>
        <SAMPLE_ATTRIBUTE><TAG>ww_population</TAG><VALUE>250000</VALUE></SAMPLE_ATTRIBUTE>
        <SAMPLE_ATTRIBUTE><TAG>bioproject</TAG><VALUE>PRJNA000999</VALUE></SAMPLE_ATTRIBUTE>
      </SAMPLE_ATTRIBUTES>
    </SAMPLE>
    <RUN_SET>
      <RUN accession="SRR29000001" total_spots="812345" total_bases="245000000" published="2024-10-20 08:15:02" load_date="2024-10-18 11:02:31" is_public="true"/>
      <RUN accession="SRR29000002" total_spots="700001" total_bases="211000000" is_public="true"/>
    </RUN_SET>
    <ReleaseDate>2024-10-21</ReleaseDate>
    <LoadDate>2024-10-19</LoadDate>
  </EXPERIMENT_PACKAGE>
  <EXPERIMENT_PACKAGE>
    <EXPERIMENT accession="SRX24000002"/>
    <SAMPLE accession="SRS20000002">
      <IDENTIFIERS>
        <EXTERNAL_ID namespace="BioProject">PRJNA111111</EXTERNAL_ID>
      </IDENTIFIERS>
      <SAMPLE_ATTRIBUTES>
        <SAMPLE_ATTRIBUTE><TAG>submitted_by</TAG><VALUE>County Health Dept</VALUE></SAMPLE_ATTRIBUTE>
      </SAMPLE_ATTRIBUTES>
    </SAMPLE>
    <RUN_SET>
      <RUN accession="SRR29000003" total_spots="1000"/>
    </RUN_SET>
  </EXPERIMENT_PACKAGE>
</EXPERIMENT_PACKAGE_SET>
"""
