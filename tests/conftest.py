"""Pytest configuration and shared fixtures for the maestromd test suite.

This module provides shared fixtures, test configuration, and utilities
that are used across the entire test suite.
"""

import os

import pytest

# Configure Hypothesis for property-based testing
try:
    from hypothesis import Phase, Verbosity, settings

    # Register custom Hypothesis profiles
    settings.register_profile("ci", max_examples=100, verbosity=Verbosity.verbose)
    settings.register_profile("dev", max_examples=20)
    settings.register_profile(
        "debug", max_examples=10, verbosity=Verbosity.verbose, phases=[Phase.explicit, Phase.reuse, Phase.generate]
    )

    # Load profile from environment or use default
    profile = os.getenv("HYPOTHESIS_PROFILE", "dev")
    settings.load_profile(profile)
except ImportError:
    # Hypothesis not installed, skip configuration
    pass


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests - fast, isolated component tests")
    config.addinivalue_line("markers", "integration: Integration tests - component interaction tests")
    config.addinivalue_line("markers", "e2e: End-to-end tests - full pipeline tests")
    config.addinivalue_line("markers", "slow: Slow tests that may take several seconds")
    config.addinivalue_line("markers", "fuzzing: Property-based tests driven by hypothesis")
    config.addinivalue_line("markers", "network: Tests that exercise the HTTP image loader")


@pytest.fixture(autouse=True)
def _clean_network_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep host environment switches from leaking into image loader tests."""
    monkeypatch.delenv("MAESTROMD_DISABLE_NETWORK", raising=False)
    monkeypatch.delenv("MAESTROMD_USER_AGENT", raising=False)


@pytest.fixture
def sample_note() -> str:
    """Provide a troubleshooting note that uses every supported construct.

    Returns
    -------
    str
        Markdown note with styled code, lists, a table and a code block.

    """
    return """# Ticket 4411

Customer reports slow reports. Run ``SELECT * FROM jobs`` first,
then check `pg_stat_activity`.

## Checklist

- [x] Collect logs
- [ ] Check **indexes**
- [ ] Escalate

1. Open the console
2. Run ``VACUUM ANALYZE``

> Remember: never run ``DROP`` in production.

```sql
-- ``not styled`` inside a fence
SELECT count(*) FROM jobs;
```

| Query | Owner | Rows |
|:------|:-----:|-----:|
| ``q1`` | ops | 10 |
| `q2` | dev | 200 |

***

See [the runbook](https://runbooks.example/db "Runbook") for details.
"""


@pytest.fixture
def styled_sentence() -> str:
    """Provide the canonical one-line styled code sentence."""
    return "Use ``SELECT *`` here"
