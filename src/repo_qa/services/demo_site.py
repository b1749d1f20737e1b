"""Fixture suite for the SauceDemo demo shop.

These descriptors and findings do not depend on the analyzed repository.
They are concatenated after the generic results by the test generator and
the risk checklist, so the generic logic can be exercised without them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from urllib.parse import urljoin

from repo_qa.domain.entities import (
    Priority,
    RiskFinding,
    RiskLevel,
    TestDescriptor,
    TestSuitePlan,
)

DEFAULT_DEMO_URL = "https://www.saucedemo.com/"
DEMO_SITE_NAME = "SauceDemo"


@dataclass(frozen=True, slots=True)
class AlwaysRunFindings:
    """Findings appended to each checklist pass regardless of repository contents."""

    security: list[RiskFinding] = field(default_factory=list)
    code_quality: list[RiskFinding] = field(default_factory=list)
    configuration: list[RiskFinding] = field(default_factory=list)


def demo_site_findings(base_url: str = DEFAULT_DEMO_URL) -> AlwaysRunFindings:
    """Return the fixed demo-site advisories for each checklist pass."""
    return AlwaysRunFindings(
        security=[
            RiskFinding(
                type="login_security",
                description=f"{DEMO_SITE_NAME} login page should be tested for security vulnerabilities",
                level=RiskLevel.HIGH,
                url=base_url,
                remediation="Test for SQL injection, XSS, and CSRF vulnerabilities",
            ),
            RiskFinding(
                type="checkout_security",
                description=f"{DEMO_SITE_NAME} checkout process should be tested for security vulnerabilities",
                level=RiskLevel.HIGH,
                url=urljoin(base_url, "checkout-step-one.html"),
                remediation="Test for data validation, input sanitization, and secure form submissions",
            ),
        ],
        code_quality=[
            RiskFinding(
                type="web_accessibility",
                description=f"{DEMO_SITE_NAME} website should be tested for accessibility issues",
                level=RiskLevel.MEDIUM,
                url=base_url,
                remediation="Run accessibility tests to ensure compliance with WCAG standards",
            ),
        ],
        configuration=[
            RiskFinding(
                type="browser_compatibility",
                description=f"{DEMO_SITE_NAME} should be tested across multiple browsers",
                level=RiskLevel.MEDIUM,
                url=base_url,
                remediation="Configure tests to run on Chrome, Firefox, and Safari browsers",
            ),
        ],
    )


def demo_site_descriptors(base_url: str = DEFAULT_DEMO_URL) -> TestSuitePlan:
    """Return the fixed demo-site descriptors; unit and integration stay empty."""
    return TestSuitePlan(
        e2e_tests=[
            TestDescriptor(
                name=f"{DEMO_SITE_NAME} Login Tests",
                description=f"Test login functionality on {DEMO_SITE_NAME} site",
                framework="Playwright",
                priority=Priority.HIGH,
                type="e2e",
                template="test_templates/saucedemo_login_test.js",
                url=base_url,
            ),
            TestDescriptor(
                name=f"{DEMO_SITE_NAME} Shopping Cart Tests",
                description=f"Test shopping cart functionality on {DEMO_SITE_NAME} site",
                framework="Playwright",
                priority=Priority.HIGH,
                type="e2e",
                template="test_templates/saucedemo_cart_test.js",
                url=base_url,
            ),
            TestDescriptor(
                name=f"{DEMO_SITE_NAME} Checkout Process Tests",
                description=f"Test checkout process on {DEMO_SITE_NAME} site",
                framework="Playwright",
                priority=Priority.HIGH,
                type="e2e",
                template="test_templates/saucedemo_checkout_test.js",
                url=base_url,
            ),
        ],
        api_tests=[
            TestDescriptor(
                name=f"{DEMO_SITE_NAME} API Tests",
                description=f"Tests for {DEMO_SITE_NAME} API (if available)",
                framework="Axios",
                priority=Priority.MEDIUM,
                type="api",
                url=urljoin(base_url, "api"),
            ),
        ],
        performance_tests=[
            TestDescriptor(
                name=f"{DEMO_SITE_NAME} Performance Tests",
                description=f"Performance tests for {DEMO_SITE_NAME} site",
                framework="Lighthouse",
                priority=Priority.MEDIUM,
                type="performance",
                template="test_templates/saucedemo_performance_test.js",
                url=base_url,
            ),
        ],
        security_tests=[
            TestDescriptor(
                name=f"{DEMO_SITE_NAME} Security Tests",
                description=f"Security tests for {DEMO_SITE_NAME} site",
                framework="OWASP ZAP",
                priority=Priority.HIGH,
                type="security",
                template="test_templates/saucedemo_security_test.js",
                url=base_url,
            ),
        ],
    )
