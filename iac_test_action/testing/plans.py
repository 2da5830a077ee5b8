"""Sample ``terraform show -json`` documents for tests."""

from typing import Any


def ses_domain_plan(
    domain: str = "example.com", with_dmarc: bool = True
) -> dict[str, Any]:
    """Plan for the domain-verification example with DKIM and (optionally) DMARC."""
    resources: list[dict[str, Any]] = [
        {
            "address": "module.ses.aws_ses_domain_identity.this[0]",
            "mode": "managed",
            "type": "aws_ses_domain_identity",
            "name": "this",
            "index": 0,
            "provider_name": "registry.terraform.io/hashicorp/aws",
            "schema_version": 0,
            "values": {"domain": domain},
            "sensitive_values": {},
        },
        {
            "address": "module.ses.aws_ses_domain_dkim.this[0]",
            "mode": "managed",
            "type": "aws_ses_domain_dkim",
            "name": "this",
            "values": {"domain": domain},
        },
    ]
    if with_dmarc:
        resources.append(
            {
                "address": "module.ses.aws_route53_record.dmarc[0]",
                "mode": "managed",
                "type": "aws_route53_record",
                "name": "dmarc",
                "values": {
                    "name": f"_dmarc.{domain}",
                    "type": "TXT",
                    "ttl": 300,
                    "records": ["v=DMARC1; p=none;"],
                },
            }
        )
    resources.append(
        {
            "address": "module.ses.aws_route53_record.verification[0]",
            "mode": "managed",
            "type": "aws_route53_record",
            "name": "verification",
            "values": {"name": f"_amazonses.{domain}", "type": "TXT", "records": None},
        }
    )

    return {
        "format_version": "1.2",
        "terraform_version": "1.7.5",
        "planned_values": {
            "root_module": {
                "child_modules": [
                    {"address": "module.ses", "resources": resources},
                ]
            }
        },
    }


def ses_email_plan(email: str = "test@example.com") -> dict[str, Any]:
    """Plan for the email-verification example."""
    return {
        "format_version": "1.2",
        "planned_values": {
            "root_module": {
                "child_modules": [
                    {
                        "address": "module.ses",
                        "resources": [
                            {
                                "address": "module.ses.aws_ses_email_identity.this[0]",
                                "type": "aws_ses_email_identity",
                                "name": "this",
                                "values": {"email": email},
                            }
                        ],
                    }
                ]
            }
        },
    }
