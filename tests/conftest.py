# tests/conftest.py
"""Shared test fixtures and sample documents.

Sample documents:
- SIMPLE_FLOW: one pipe forwarding to one exit (the canonical round trip)
- CHAINED_FLOW: receiver, three pipes without forwards, no exits
- ADAPTER_DOCUMENT: two adapters, each with its own receiver and pipeline

Hypothesis Configuration:
- "ci" profile: Fast tests for CI (100 examples) - default
- "nightly" profile: Thorough tests (1000 examples)
- "debug" profile: Minimal tests with verbose output (10 examples)

Set profile via environment variable:
    HYPOTHESIS_PROFILE=nightly pytest tests/property/
"""

import logging
import os
from collections.abc import Iterator

import pytest
import structlog
from hypothesis import Phase, Verbosity, settings

SIMPLE_FLOW = (
    '<Pipeline firstPipe="A">'
    '<FixedResultPipe name="A"><Forward name="success" path="EXIT"/></FixedResultPipe>'
    '<Exit path="EXIT" state="success"/>'
    "</Pipeline>"
)

CHAINED_FLOW = """<Adapter name="Chain">
\t<Receiver name="In">
\t\t<JavaListener name="listener"/>
\t</Receiver>
\t<Pipeline>
\t\t<EchoPipe name="A" x="100" y="50"/>
\t\t<XsltPipe name="B" styleSheetName="b.xsl"/>
\t\t<JsonValidator name="C">
\t\t\t<Param name="root" value="doc"/>
\t\t</JsonValidator>
\t</Pipeline>
</Adapter>
"""

ADAPTER_DOCUMENT = """<Configuration>
\t<Adapter name="First">
\t\t<Receiver name="FirstIn"/>
\t\t<Pipeline firstPipe="Start">
\t\t\t<EchoPipe name="Start">
\t\t\t\t<Forward name="success" path="READY"/>
\t\t\t</EchoPipe>
\t\t\t<Exits>
\t\t\t\t<Exit path="READY" state="success" x="300" y="40"/>
\t\t\t\t<Exit path="ERROR" state="error"/>
\t\t\t</Exits>
\t\t</Pipeline>
\t</Adapter>
\t<Adapter name="Second">
\t\t<Receiver name="SecondIn"/>
\t\t<Pipeline>
\t\t\t<SenderPipe name="Send"/>
\t\t</Pipeline>
\t</Adapter>
</Configuration>
"""


@pytest.fixture
def simple_flow() -> str:
    return SIMPLE_FLOW


@pytest.fixture
def chained_flow() -> str:
    return CHAINED_FLOW


@pytest.fixture
def adapter_document() -> str:
    return ADAPTER_DOCUMENT


@pytest.fixture(autouse=True)
def _restore_logging() -> Iterator[None]:
    """Tests that configure logging must not leak handlers into the next test."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    structlog.reset_defaults()
    root.handlers = handlers
    root.setLevel(level)


# =============================================================================
# Hypothesis Configuration
# =============================================================================

# CI profile: Fast tests for continuous integration
settings.register_profile(
    "ci",
    max_examples=100,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,  # Disable deadline for CI (timing varies)
)

# Nightly profile: Thorough testing for scheduled runs
settings.register_profile(
    "nightly",
    max_examples=1000,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

# Debug profile: Minimal examples with verbose output for debugging
settings.register_profile(
    "debug",
    max_examples=10,
    verbosity=Verbosity.verbose,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

# Load profile from environment, default to "ci"
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "ci"))
