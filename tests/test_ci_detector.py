"""CI detection tests"""

import pytest

from netlify_deploy.core.ci_detector import detect_ci_variable, is_running_in_ci
from netlify_deploy.core.interaction import NullInteractionService, is_interaction_available

from tests.conftest import FakeInteraction


class TestCiDetector:
    """CI environment detection"""

    def test_empty_environment(self):
        assert not is_running_in_ci({})

    @pytest.mark.parametrize("name", ["CI", "GITHUB_ACTIONS", "TF_BUILD", "JENKINS_URL"])
    def test_known_variables(self, name):
        assert is_running_in_ci({name: "true"})

    @pytest.mark.parametrize("value", ["", "   ", "false", "FALSE", "0", " 0 "])
    def test_falsy_values_do_not_count(self, value):
        assert not is_running_in_ci({"CI": value})

    def test_reports_first_matching_variable(self):
        assert detect_ci_variable({"CI": "1", "GITLAB_CI": "true"}) == "CI"

    def test_extra_variables(self):
        assert not is_running_in_ci({"MY_PIPELINE": "yes"})
        assert is_running_in_ci({"MY_PIPELINE": "yes"}, ["MY_PIPELINE"])


class TestInteractionAvailability:
    """Prompting is gated on a live service outside CI"""

    def test_null_service(self):
        assert not is_interaction_available(NullInteractionService(), {})

    def test_available_outside_ci(self):
        assert is_interaction_available(FakeInteraction(), {})

    def test_disabled_in_ci(self):
        assert not is_interaction_available(FakeInteraction(), {"CI": "true"})

    def test_missing_service(self):
        assert not is_interaction_available(None, {})
