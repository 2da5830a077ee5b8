"""Post-apply checks against live SES and Route53 resources."""

import functools
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

import boto3

from iac_test_action.errors import SkipCheck
from iac_test_action.plan_validator import assert_value, contains, equals, first_item
from iac_test_action.runner import Check

log = logging.getLogger(__name__)

PAGE_SIZE = 100


def _zone_name(zone: Mapping[str, Any]) -> str:
    return str(zone["Name"]).rstrip(".").lower()


def select_hosted_zone(
    zones: Sequence[Mapping[str, Any]], domain: str
) -> Mapping[str, Any] | None:
    """Pick the hosted zone that serves a domain.

    The zone must be the domain itself or one of its parent domains; when
    several match, the most specific (longest) name wins.
    """
    domain = domain.rstrip(".").lower()
    best: Mapping[str, Any] | None = None
    for zone in zones:
        name = _zone_name(zone)
        if domain != name and not domain.endswith(f".{name}"):
            continue
        if best is None or len(name) > len(_zone_name(best)):
            best = zone
    return best


@dataclass(frozen=True, kw_only=True)
class SesInspector:
    """Read-only inspection of SES identities and Route53 records."""

    ses: Any = field(repr=False)
    route53: Any = field(repr=False)

    @classmethod
    def from_region(cls, region: str) -> "SesInspector":
        """Create an inspector with boto3 clients for a region."""
        log.info("Creating AWS clients for region: %s", region)
        return cls(
            ses=boto3.client("ses", region_name=region),
            route53=boto3.client("route53", region_name=region),
        )

    def list_identities(self, identity_type: str) -> Sequence[str]:
        """List every SES identity of a type (``EmailAddress`` or ``Domain``)."""
        identities: list[str] = []
        params: dict[str, Any] = {"IdentityType": identity_type, "MaxItems": PAGE_SIZE}
        while True:
            response = self.ses.list_identities(**params)
            identities.extend(response.get("Identities", []))
            if not (token := response.get("NextToken")):
                return identities
            params["NextToken"] = token

    def list_hosted_zones(self) -> Sequence[Mapping[str, Any]]:
        """List every Route53 hosted zone."""
        zones: list[Mapping[str, Any]] = []
        params: dict[str, Any] = {}
        while True:
            response = self.route53.list_hosted_zones(**params)
            zones.extend(response.get("HostedZones", []))
            if not response.get("IsTruncated"):
                return zones
            params["Marker"] = response["NextMarker"]

    def find_txt_record(
        self, zone_id: str, record_name: str
    ) -> Mapping[str, Any] | None:
        """Find a TXT record set by fully qualified name."""
        fqdn = record_name.lower()
        if not fqdn.endswith("."):
            fqdn = f"{fqdn}."
        response = self.route53.list_resource_record_sets(
            HostedZoneId=zone_id,
            StartRecordName=fqdn,
            StartRecordType="TXT",
        )
        for record in response.get("ResourceRecordSets", []):
            name = str(record.get("Name", "")).lower()
            if name == fqdn and record.get("Type") == "TXT":
                return record
        return None

    def verify_email_identity(self, email: str) -> None:
        """Assert an email identity exists and has verification attributes."""
        identities = self.list_identities("EmailAddress")
        assert_value("EmailAddress identities", identities, contains(email))

        response = self.ses.get_identity_verification_attributes(Identities=[email])
        assert_value(
            "VerificationAttributes",
            response.get("VerificationAttributes", {}),
            contains(email),
        )

    def verify_domain_identity(self, domain: str) -> None:
        """Assert a domain identity exists, has verification attributes and DKIM enabled."""
        identities = self.list_identities("Domain")
        assert_value("Domain identities", identities, contains(domain))

        response = self.ses.get_identity_verification_attributes(Identities=[domain])
        assert_value(
            "VerificationAttributes",
            response.get("VerificationAttributes", {}),
            contains(domain),
        )

        response = self.ses.get_identity_dkim_attributes(Identities=[domain])
        dkim = response.get("DkimAttributes", {})
        assert_value("DkimAttributes", dkim, contains(domain))
        assert_value("DkimEnabled", dkim[domain].get("DkimEnabled"), equals(True))

    def verify_dmarc_record(self, domain: str) -> None:
        """Assert the domain's DMARC TXT record carries ``v=DMARC1``.

        Skips when no hosted zone serves the domain or the record is absent;
        test accounts often lack the public zone.
        """
        zone = select_hosted_zone(self.list_hosted_zones(), domain)
        if zone is None:
            raise SkipCheck(f"No Route53 hosted zone serves {domain}")

        record_name = f"_dmarc.{domain}"
        record = self.find_txt_record(zone["Id"], record_name)
        if record is None:
            raise SkipCheck(f"DMARC record {record_name} not found in {zone['Name']}")

        values = [rr.get("Value") for rr in record.get("ResourceRecords", [])]
        assert_value(record_name, values, first_item(contains("v=DMARC1")))
        log.info("DMARC record found for domain %s", domain)


def build_ses_checks(
    inspector: SesInspector,
    email: str | None = None,
    domain: str | None = None,
    timeout: float | None = None,
) -> Sequence[Check]:
    """Build the live checks for whichever identities are under test."""
    checks: list[Check] = []
    if email:
        checks.append(
            Check(
                name="SESEmailVerification",
                func=functools.partial(inspector.verify_email_identity, email),
                timeout=timeout,
            )
        )
    if domain:
        checks.append(
            Check(
                name="SESDomainVerification",
                func=functools.partial(inspector.verify_domain_identity, domain),
                timeout=timeout,
            )
        )
        checks.append(
            Check(
                name="DMARCRecordValidation",
                func=functools.partial(inspector.verify_dmarc_record, domain),
                timeout=timeout,
            )
        )
    return checks
