"""
Shared test fixtures.

Settings are read from the environment at import time, so the variables the
engine depends on are pinned before any ``agent_readiness`` import.
"""

import os

os.environ["ANTHROPIC_API_KEY"] = ""
os.environ["CLAUDE_MODEL"] = "claude-3-5-haiku-latest"
os.environ["LOG_JSON"] = "false"
os.environ["AI_ASSESSMENT_MAX_RETRIES"] = "2"
os.environ["AI_ASSESSMENT_FALLBACK_ENABLED"] = "true"

import pytest

from agent_readiness.components.scoring.engine import ReconciliationEngine
from agent_readiness.platform.config import DEFAULT_METRICS_CONFIG


@pytest.fixture
def engine():
    return ReconciliationEngine(DEFAULT_METRICS_CONFIG)


@pytest.fixture
def complete_repository():
    """Repository with every indicator present and a healthy file-size sub-report."""
    return {
        "hasReadme": True,
        "hasAgents": True,
        "hasContributing": True,
        "hasLicense": True,
        "hasWorkflows": True,
        "hasTests": True,
        "errorHandling": True,
        "languages": ["Python", "TypeScript"],
        "fileCount": 120,
        "linesOfCode": 8400,
        "repositorySizeMB": 3.5,
        "readmeContent": "# Demo\n\nRun `make install` then `make test`.",
        "workflowFiles": [".github/workflows/ci.yml"],
        "testFiles": ["tests/test_app.py", "tests/test_api.py"],
        "fileSizeAnalysis": {
            "totalFiles": 120,
            "filesBySize": {"under100KB": 118, "under500KB": 2},
            "largeFiles": [],
            "criticalFiles": [
                {"path": "README.md", "size": 4096, "sizeFormatted": "4 KB", "type": "documentation", "isOptimal": True},
            ],
            "contextConsumption": {"contextEfficiency": "excellent", "totalContextFiles": 3},
            "agentCompatibility": {
                "cursor": 90,
                "githubCopilot": 85,
                "claudeWeb": 80,
                "claudeApi": 95,
                "overall": 90,
            },
            "recommendations": [],
        },
    }


@pytest.fixture
def bare_repository():
    """Repository with only a README and a LICENSE."""
    return {
        "hasReadme": True,
        "hasAgents": False,
        "hasContributing": False,
        "hasLicense": True,
        "hasWorkflows": False,
        "hasTests": False,
        "errorHandling": False,
        "languages": [],
        "fileCount": 10,
    }


@pytest.fixture
def sample_website():
    return {
        "websiteUrl": "https://example.com",
        "pageTitle": "Example Domain",
        "metaDescription": "An example site",
        "hasStructuredData": True,
        "hasOpenGraph": True,
        "hasTwitterCards": False,
        "hasSitemap": True,
        "hasRobotsTxt": False,
        "hasFavicon": True,
        "pageLoadSpeed": 1200,
        "mobileFriendly": True,
        "accessibilityScore": 85,
        "contentLength": 5400,
        "imageCount": 12,
        "linkCount": 40,
        "headingStructure": {"h1": 1, "h2": 6},
        "technologies": ["React"],
        "securityHeaders": ["content-security-policy"],
        "socialMediaLinks": [],
        "contactInfo": ["hello@example.com"],
        "navigationStructure": ["Home", "Docs"],
    }


@pytest.fixture
def full_ai_assessment():
    """A complete, well-formed generative-model assessment."""
    return {
        "readinessScore": 78,
        "categories": {
            "documentation": 16,
            "instructionClarity": 15,
            "workflowAutomation": 14,
            "riskCompliance": 12,
            "integrationStructure": 13,
            "fileSizeOptimization": 18,
        },
        "confidence": {
            "documentation": 90,
            "instructionClarity": 85,
            "workflowAutomation": 80,
            "riskCompliance": 75,
            "integrationStructure": 80,
            "fileSizeOptimization": 88,
        },
        "findings": ["Well-structured repository"],
        "recommendations": ["Add an AGENTS.md"],
    }
