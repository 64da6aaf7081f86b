"""Scoring constants: point tables, thresholds and message templates.

Each point table is a list of ``(points, predicate)`` pairs; a category's raw
score is the sum of the points whose predicate holds for the analysis. Raw
scores are out of ``MetricsConfig.raw_category_max`` (20) before scaling.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Tuple

from ...shared.categories import Category

Predicate = Callable[[Any], bool]
PointTable = List[Tuple[float, Predicate]]

# Website heuristics
FAST_PAGE_LOAD_MS = 3000
SLOW_PAGE_LOAD_MS = 3000
MIN_ACCESSIBILITY_SCORE = 60
SUBSTANTIAL_CONTENT_LENGTH = 1000
THIN_CONTENT_LENGTH = 500
MIN_LINK_COUNT = 5

# Repository fileSizeOptimization: agent compatibility (0-100) divided by this
COMPATIBILITY_DIVISOR = 5.0
# Category-scale value when a repository has no file-size sub-report
DEFAULT_FILE_SIZE_SCORE = 10.0

# Category finding thresholds (category scale)
VERY_LOW_SCORE = 5
LOW_SCORE = 10
EXCELLENT_SCORE = 16

# Alignment / health thresholds
ALIGNMENT_REVIEW_THRESHOLD = 70
CATEGORY_ALIGNMENT_FOCUS_THRESHOLD = 60
HIGH_CONFIDENCE_LEVEL = 80
MEDIUM_CONFIDENCE_LEVEL = 60
MAX_HIGH_SEVERITY_ISSUES = 2
SYSTEM_WIDE_REVIEW_ISSUE_COUNT = 5
COMPATIBILITY_VARIANCE_LIMIT = 20
LARGE_FILE_COUNT_TOLERANCE = 2
SEVERE_CONFIDENCE = 40

# Severity penalties for the overall-assessment alignment score
SEVERITY_PENALTIES = {"critical": 25, "high": 15, "medium": 8, "low": 3}


def _has(items: Any) -> bool:
    return bool(items)


REPOSITORY_POINTS: Dict[Category, PointTable] = {
    Category.DOCUMENTATION: [
        (8, lambda a: a.has_readme),
        (6, lambda a: a.has_agents),
        (4, lambda a: a.has_contributing),
        (2, lambda a: a.has_license),
    ],
    Category.INSTRUCTION_CLARITY: [
        (12, lambda a: a.has_readme),
        (8, lambda a: a.has_agents),
    ],
    Category.WORKFLOW_AUTOMATION: [
        (15, lambda a: a.has_workflows),
        (5, lambda a: a.has_tests),
    ],
    Category.RISK_COMPLIANCE: [
        (5, lambda a: a.has_license),
        (10, lambda a: a.error_handling),
        (5, lambda a: a.has_tests),
    ],
    Category.INTEGRATION_STRUCTURE: [
        (8, lambda a: a.has_workflows),
        (6, lambda a: a.has_tests),
        (6, lambda a: _has(a.languages)),
    ],
}

WEBSITE_POINTS: Dict[Category, PointTable] = {
    Category.DOCUMENTATION: [
        (8, lambda a: a.has_structured_data),
        (4, lambda a: a.has_open_graph),
        (3, lambda a: a.has_twitter_cards),
        (3, lambda a: a.has_sitemap),
        (2, lambda a: a.has_robots_txt),
    ],
    Category.INSTRUCTION_CLARITY: [
        (8, lambda a: _has(a.technologies)),
        (6, lambda a: _has(a.contact_info)),
        (3, lambda a: _has(a.social_media_links)),
        (3, lambda a: _has(a.navigation_structure)),
    ],
    Category.WORKFLOW_AUTOMATION: [
        (8, lambda a: a.mobile_friendly),
        (6, lambda a: bool(a.page_load_speed) and a.page_load_speed < FAST_PAGE_LOAD_MS),
        (4, lambda a: _has(a.navigation_structure)),
        (2, lambda a: a.has_service_worker),
    ],
    Category.RISK_COMPLIANCE: [
        (8, lambda a: _has(a.security_headers)),
        (6, lambda a: _has(a.contact_info)),
        (4, lambda a: (a.accessibility_score or 0) > MIN_ACCESSIBILITY_SCORE),
        (2, lambda a: a.has_manifest),
    ],
    Category.INTEGRATION_STRUCTURE: [
        (8, lambda a: _has(a.technologies)),
        (6, lambda a: _has(a.social_media_links)),
        (4, lambda a: _has(a.contact_info)),
        (2, lambda a: a.has_service_worker),
    ],
    Category.FILE_SIZE_OPTIMIZATION: [
        (6, lambda a: (a.content_length or 0) > SUBSTANTIAL_CONTENT_LENGTH),
        (4, lambda a: (a.image_count or 0) > 0),
        (4, lambda a: (a.link_count or 0) > MIN_LINK_COUNT),
        (3, lambda a: a.heading_count("h1") > 0),
        (3, lambda a: a.heading_count("h2") > 0),
    ],
}


def sum_points(table: PointTable, analysis: Any) -> float:
    return float(sum(points for points, predicate in table if predicate(analysis)))


# ---------------------------------------------------------------------------
# Category-specific gaps: (predicate, finding, recommendation). A gap fires
# when its predicate holds for the unreconciled static analysis.
# ---------------------------------------------------------------------------

Gap = Tuple[Predicate, str, str]

REPOSITORY_GAPS: Dict[Category, List[Gap]] = {
    Category.DOCUMENTATION: [
        (lambda a: not a.has_readme, "Missing README.md file",
         "Create comprehensive README.md with setup instructions"),
        (lambda a: not a.has_agents, "Missing AGENTS.md file",
         "Add AGENTS.md with AI agent specific instructions"),
        (lambda a: not a.has_contributing, "Missing CONTRIBUTING.md file",
         "Add CONTRIBUTING.md for contributor guidance"),
        (lambda a: not a.has_license, "Missing LICENSE file",
         "Add LICENSE file to clarify usage rights"),
    ],
    Category.INSTRUCTION_CLARITY: [
        (lambda a: not a.has_readme, "No setup instructions available",
         "Create detailed setup and usage instructions"),
        (lambda a: not a.has_agents, "No AI agent specific instructions",
         "Add specific instructions for AI agents"),
    ],
    Category.WORKFLOW_AUTOMATION: [
        (lambda a: not a.has_workflows, "No CI/CD workflows detected",
         "Implement CI/CD workflows for automated processes"),
        (lambda a: not a.has_tests, "No automated tests found",
         "Add automated test suite"),
    ],
    Category.RISK_COMPLIANCE: [
        (lambda a: not a.has_license, "No license information available",
         "Add appropriate license file"),
        (lambda a: not a.error_handling, "Limited error handling detected",
         "Implement comprehensive error handling"),
    ],
    Category.INTEGRATION_STRUCTURE: [
        (lambda a: not a.has_workflows, "No automation infrastructure",
         "Set up automation infrastructure"),
        (lambda a: not a.has_tests, "No testing infrastructure",
         "Implement testing infrastructure"),
    ],
}

WEBSITE_GAPS: Dict[Category, List[Gap]] = {
    Category.DOCUMENTATION: [
        (lambda a: not a.has_structured_data, "Missing structured data markup",
         "Add structured data markup for better AI understanding"),
        (lambda a: not a.has_open_graph, "No Open Graph meta tags found",
         "Implement Open Graph meta tags for social sharing"),
        (lambda a: not a.has_twitter_cards, "No Twitter Cards meta tags",
         "Add Twitter Cards meta tags for better social media integration"),
        (lambda a: not a.has_sitemap, "No XML sitemap available",
         "Create XML sitemap for better search engine indexing"),
        (lambda a: not a.has_robots_txt, "No robots.txt file found",
         "Add robots.txt file for search engine directives"),
        (lambda a: not a.has_favicon, "No favicon detected",
         "Add favicon for better brand recognition"),
    ],
    Category.INSTRUCTION_CLARITY: [
        (lambda a: not a.technologies, "No technology stack detected",
         "Add technology stack information for better integration"),
        (lambda a: not a.contact_info, "No contact information found",
         "Add comprehensive contact information"),
        (lambda a: not a.social_media_links, "No social media links detected",
         "Add social media links for better connectivity"),
    ],
    Category.WORKFLOW_AUTOMATION: [
        (lambda a: not a.mobile_friendly, "Website not mobile-friendly",
         "Optimize website for mobile devices"),
        (lambda a: bool(a.page_load_speed) and a.page_load_speed > SLOW_PAGE_LOAD_MS,
         "Slow page load speed detected",
         "Improve page load speed for better user experience"),
        (lambda a: not a.navigation_structure, "No clear navigation structure",
         "Implement clear navigation structure"),
    ],
    Category.RISK_COMPLIANCE: [
        (lambda a: not a.security_headers, "No security headers detected",
         "Implement security headers for better protection"),
        (lambda a: not a.contact_info, "No contact information available",
         "Add contact information for compliance"),
        (lambda a: bool(a.accessibility_score) and a.accessibility_score < MIN_ACCESSIBILITY_SCORE,
         "Accessibility issues detected",
         "Improve website accessibility for better usability"),
    ],
    Category.INTEGRATION_STRUCTURE: [
        (lambda a: not a.technologies, "No technology stack detected",
         "Document technology stack for better integration"),
        (lambda a: not a.social_media_links, "No social media integration found",
         "Add social media integration for better connectivity"),
        (lambda a: not a.contact_info, "No contact information for integration",
         "Add contact information for integration support"),
    ],
    Category.FILE_SIZE_OPTIMIZATION: [
        (lambda a: bool(a.content_length) and a.content_length < THIN_CONTENT_LENGTH,
         "Very limited content available",
         "Add more comprehensive content for better context"),
        # image_count of exactly 0 is reported only when the crawler measured it
        (lambda a: a.image_count is not None and a.image_count == 0,
         "No images found for visual context",
         "Add relevant images for better visual context"),
        (lambda a: bool(a.link_count) and a.link_count < MIN_LINK_COUNT,
         "Limited internal linking structure",
         "Improve internal linking structure for better navigation"),
    ],
}

# Repository file-size messages
LARGE_FILES_FINDING = "{count} files exceed 2MB, limiting AI agent compatibility"
LARGE_FILES_RECOMMENDATION = "Consider splitting large files or using repository-level processing tools"
CRITICAL_FILES_FINDING = "{count} critical files exceed optimal sizes for AI agents"
CRITICAL_FILES_RECOMMENDATION = (
    "Optimize critical files (README, AGENTS.md, etc.) for better AI agent processing"
)
POOR_CONTEXT_FINDING = "Context consumption efficiency is poor"
POOR_CONTEXT_RECOMMENDATION = (
    "Restructure documentation into smaller, focused files for better AI agent processing"
)

# Score-band messages
VERY_LOW_FINDING = "{category} score is very low ({value}/{scale}) - critical improvement needed"
LOW_FINDING = "{category} score is low ({value}/{scale}) - needs improvement"
EXCELLENT_FINDING = "{category} score is excellent ({value}/{scale}) - well optimized"
FOCUS_RECOMMENDATION = "Focus on improving {category} through targeted enhancements"

# Subject-level insight messages
WEBSITE_INSIGHTS: List[Gap] = [
    (lambda a: not a.has_structured_data, "Missing structured data markup",
     "Add JSON-LD structured data for better AI understanding"),
    (lambda a: not a.has_open_graph, "No Open Graph meta tags found",
     "Implement Open Graph meta tags for social sharing"),
    (lambda a: not a.has_twitter_cards, "No Twitter Cards meta tags",
     "Add Twitter Cards meta tags for better social media integration"),
    (lambda a: not a.contact_info, "No contact information found",
     "Add clear contact information (phone, email, address)"),
    (lambda a: not a.mobile_friendly, "Website not mobile-friendly",
     "Optimize website for mobile devices"),
    (lambda a: (a.accessibility_score or 0) < MIN_ACCESSIBILITY_SCORE, "Accessibility issues detected",
     "Improve website accessibility for better usability"),
    (lambda a: not a.has_sitemap, "No XML sitemap available",
     "Create and submit an XML sitemap for better indexing"),
    (lambda a: not a.has_robots_txt, "No robots.txt file found",
     "Add robots.txt file for search engine directives"),
]

REPOSITORY_INSIGHTS: List[Gap] = [
    (lambda a: not a.has_readme, "Missing README.md file",
     "Create comprehensive README.md with setup instructions"),
    (lambda a: not a.has_agents, "Missing AGENTS.md file",
     "Add AGENTS.md with AI agent specific instructions"),
]

LOW_AI_CONFIDENCE_FINDING = "Low AI confidence in: {categories}"
LOW_AI_CONFIDENCE_RECOMMENDATION = (
    "Consider providing more context or improving documentation for better AI analysis"
)

# Consistency messages
HIGH_VARIANCE_RECOMMENDATION = (
    "High variance detected in {category}: static={static}, ai={ai}, variance={variance}"
)
REVIEW_ALGORITHMS_RECOMMENDATION = "Consider reviewing scoring algorithms for better alignment"
ADJUST_WEIGHTING_RECOMMENDATION = "Increase confidence thresholds or adjust weighting factors"
ADJUST_DATA_QUALITY_RECOMMENDATION = "Increase data quality or adjust weighting factors"
SYSTEM_WIDE_REVIEW_RECOMMENDATION = (
    "High number of validation issues detected - consider system-wide review"
)
ALIGN_METHODS_RECOMMENDATION = "Review and align static and AI analysis methods"
IMPROVE_CONFIDENCE_RECOMMENDATION = "Improve data quality and analysis methods for better confidence"
