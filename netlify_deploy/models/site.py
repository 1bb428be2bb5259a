"""Structured deploy information returned by `ntl deploy --json`"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class NetlifySiteCapabilities:
    """Capabilities of a Netlify site"""

    asset_acceleration: Optional[bool] = None
    form_processing: Optional[bool] = None
    cdn_propagation: Optional[str] = None
    domain_aliases: Optional[bool] = None
    secure_site: Optional[bool] = None
    proxying: Optional[bool] = None
    ssl: Optional[str] = None
    rate_cents: Optional[int] = None
    ipv6_domain: Optional[str] = None
    branch_deploy: Optional[bool] = None
    cdn_tier: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'NetlifySiteCapabilities':
        """Create from the CLI's snake_case payload (unknown keys ignored)"""
        return cls(**{k: data.get(k) for k in cls.__dataclass_fields__})

    def to_dict(self) -> Dict[str, Any]:
        return {k: getattr(self, k) for k in self.__dataclass_fields__}


@dataclass
class NetlifySite:
    """Site and deploy details for a finished deploy"""

    site_id: Optional[str] = None
    site_name: Optional[str] = None
    site_url: Optional[str] = None
    site_admin_url: Optional[str] = None
    deploy_id: Optional[str] = None
    deploy_url: Optional[str] = None
    logs: Optional[str] = None
    deploy_ssl_url: Optional[str] = None
    deploy_time: Optional[int] = None
    admin_url: Optional[str] = None
    deploy_message: Optional[str] = None
    skipped: Optional[bool] = None
    manual_deploy: Optional[bool] = None
    branch: Optional[str] = None
    framework: Optional[str] = None
    site_capabilities: Optional[NetlifySiteCapabilities] = field(default=None)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'NetlifySite':
        """Create from the CLI's snake_case payload

        Args:
            data: Decoded JSON object

        Returns:
            NetlifySite instance
        """
        values = {k: data.get(k) for k in cls.__dataclass_fields__ if k != "site_capabilities"}

        capabilities = data.get("site_capabilities")
        if isinstance(capabilities, dict):
            values["site_capabilities"] = NetlifySiteCapabilities.from_dict(capabilities)

        return cls(**values)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        data = {
            k: getattr(self, k)
            for k in self.__dataclass_fields__
            if k != "site_capabilities"
        }
        data["site_capabilities"] = (
            self.site_capabilities.to_dict() if self.site_capabilities else None
        )
        return data
