"""Shared fixtures: stand-in tools built from short Python child processes."""

import textwrap

import pytest

from stand_ins import ENCODE_COPY, EXTRACT_OK, PAYLOAD_REPEAT, ScriptedRipper


@pytest.fixture
def expected_payload():
    return bytes(range(256)) * PAYLOAD_REPEAT


@pytest.fixture
def scripted_ripper():
    """Factory for rippers driven by stand-in scripts."""

    def make(extract_script=EXTRACT_OK, encode_script=ENCODE_COPY, **kwargs):
        return ScriptedRipper(extract_script, encode_script, **kwargs)

    return make


@pytest.fixture
def query_output():
    """cdparanoia --query report for a three track disc."""
    return textwrap.dedent(
        """\
        cdparanoia III release 10.2 (September 11, 2008)

        Table of contents (audio tracks only):
        track        length               begin        copy pre ch
        ===========================================================
          1.    16503 [03:40.03]        0 [00:00.00]    no   no  2
          2.    20720 [04:36.20]    16503 [03:40.03]    no   no  2
          3.      225 [00:03.00]    37223 [08:16.23]    no   no  2
        TOTAL   37448 [08:19.23]    (audio only)

        """
    )
