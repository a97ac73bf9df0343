import pytest
from hypothesis import HealthCheck, settings

# Every test runs twice:
# 1) with the default walker depth limit ["default"]
# 2) with a tight EXPRTREE_MAX_DEPTH ["tight"], which every tree built by the
#    suite must still fit in unless a test asks for a limit explicitly.

# The depth fixture below is function scoped but constant across the examples
# of a @given test.
settings.register_profile(
    "exprtree",
    suppress_health_check=[HealthCheck.function_scoped_fixture],
    deadline=None,
)
settings.load_profile("exprtree")


@pytest.fixture(params=["default", "tight"])
def depth_mode(request):
    return request.param


@pytest.fixture(autouse=True)
def _force_depth_limit(depth_mode, monkeypatch):
    if depth_mode == "tight":
        monkeypatch.setenv("EXPRTREE_MAX_DEPTH", "64")
    else:
        monkeypatch.delenv("EXPRTREE_MAX_DEPTH", raising=False)
