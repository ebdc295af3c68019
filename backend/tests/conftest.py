"""
conftest.py — Shared pytest fixtures for the QuoteHub backend test suite.

Engine tests are pure unit tests over plain records. Repository and API tests
run against InMemoryDocumentStore; no database or external service is needed.

Import-path bootstrapping:
    The ``backend/`` directory is inserted into sys.path so that all
    ``quotehub.*`` imports resolve correctly regardless of where pytest is invoked.
"""

import sys
import os
import pytest

# ---------------------------------------------------------------------------
# Ensure ``backend/`` is on the import path before any quotehub imports occur.
# ---------------------------------------------------------------------------
_BACKEND_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if _BACKEND_DIR not in sys.path:
    sys.path.insert(0, _BACKEND_DIR)

from factories import FIXED_NOW, department_doc, quote_doc, role_doc, stage_doc  # noqa: E402


@pytest.fixture(scope="session")
def fixed_now():
    """Wednesday 15 May 2024, 10:30."""
    return FIXED_NOW


@pytest.fixture
def revenue_quote_doc():
    """
    Creative 10,000 + Design 20,000 + other departments 5,000 in fees;
    production costs 2,000 (1,500 flat in Planning + 500 fixed media in Post).
    """
    return quote_doc(
        "quote-revenue",
        phase_data={
            "Planning": [
                stage_doc([
                    department_doc("Creative", [role_doc("Designer", 6000), role_doc("Copywriter", 4000)]),
                    department_doc("Accounts", [role_doc("Account Director", 3000)]),
                ]),
            ],
            "Production/Execution": [
                stage_doc([
                    department_doc("Design", [role_doc("Art Director", 20000)]),
                    department_doc("Strategy", [role_doc("Strategist", 2000)]),
                ]),
            ],
        },
        production={
            "Planning": {
                "Decor": {"standardItems": [{"quantity": 3, "rate": 500}], "mediaItems": [], "fieldStaffItems": []},
                "Studio": {"standardItems": [], "mediaItems": [], "fieldStaffItems": []},
            },
            "Post Production/Wrap": {
                "Media Billings": {"mediaItems": [{"fixed": 500, "useFixed": True}]},
            },
        },
    )


@pytest.fixture
def memory_store():
    from quotehub.services.document_store import InMemoryDocumentStore
    return InMemoryDocumentStore()


@pytest.fixture
def repository(memory_store):
    from quotehub.services.quote_repository import QuoteRepository
    return QuoteRepository(memory_store)
