"""Deploy result extraction from CLI output"""

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from ..api.exceptions import OutputParseError
from ..constants import DEPLOY_LOGS_URL_PATTERN, DRAFT_DEPLOY_URL_PATTERN
from ..models.site import NetlifySite


@dataclass
class ExtractedResult:
    """Values scraped from a successful deploy"""

    deploy_url: Optional[str] = None
    logs_url: Optional[str] = None
    site: Optional[NetlifySite] = None

    @property
    def site_id(self) -> Optional[str]:
        return self.site.site_id if self.site else None


class ResultExtractor(ABC):
    """Turns deploy command stdout into an ExtractedResult"""

    @abstractmethod
    def extract(self, stdout: str) -> ExtractedResult:
        pass


class JsonResultExtractor(ResultExtractor):
    """Parses `ntl deploy --json` output"""

    def extract(self, stdout: str) -> ExtractedResult:
        text = (stdout or "").strip()

        # Anything printed before the JSON document (warnings, banners) is ignored
        start = text.find("{")
        end = text.rfind("}")
        if start < 0 or end < start:
            raise OutputParseError("Deploy output did not contain a JSON object")

        try:
            data = json.loads(text[start:end + 1])
        except json.JSONDecodeError as e:
            raise OutputParseError(f"Could not parse deploy output as JSON: {e}")

        if not isinstance(data, dict):
            raise OutputParseError("Deploy output JSON is not an object")

        site = NetlifySite.from_dict(data)

        return ExtractedResult(
            deploy_url=site.deploy_url,
            logs_url=site.logs,
            site=site,
        )


class PatternResultExtractor(ResultExtractor):
    """Scans human-readable output for the draft and logs URLs"""

    def extract(self, stdout: str) -> ExtractedResult:
        result = ExtractedResult()

        for line in (stdout or "").splitlines():
            if result.deploy_url is None:
                match = DRAFT_DEPLOY_URL_PATTERN.search(line)
                if match:
                    result.deploy_url = match.group(0)

            if result.logs_url is None:
                match = DEPLOY_LOGS_URL_PATTERN.search(line)
                if match:
                    result.logs_url = match.group(0)

            if result.deploy_url and result.logs_url:
                break

        return result


def get_extractor(json_mode: Optional[bool]) -> ResultExtractor:
    """Pick the extractor for the output mode"""
    if json_mode:
        return JsonResultExtractor()
    return PatternResultExtractor()
