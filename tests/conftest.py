"""Shared test fixtures for the grid reference test suite."""

import pandas as pd
import pytest

from nrfa.main import app


@pytest.fixture()
def client():
    """FastAPI test client."""
    from fastapi.testclient import TestClient

    with TestClient(app) as c:
        yield c


@pytest.fixture()
def catalogue() -> pd.DataFrame:
    """A small extract of the NRFA station catalogue."""
    return pd.DataFrame(
        {
            "id": [54022, 39001, 21009, 99999],
            "name": [
                "Severn at Plynlimon flume",
                "Thames at Kingston",
                "Tweed at Norham",
                "Bad reference",
            ],
            "gridReference": ["SN853872", "TQ1777569825", "NT898477", "SI123456"],
        }
    )
