#!/usr/bin/env python3
"""
Configuration file for manual assembly.
Contains manual-specific settings that can be easily modified.
"""

# Default manual configuration for the SR22 Aircraft Maintenance Manual
SR22_AMM_CONFIG = {
    "title": "SR22 Aircraft Maintenance Manual",
    "description": "Assemble the SR22 Aircraft Maintenance Manual",
    "author": "Cirrus Design Inc.",
    "default_toc_url": "http://servicecenters.cirrusdesign.com/tech_pubs/SR2X/pdf/amm/SR22/html/ammtoc.html",
    "default_output": "AMM.pdf",
    "default_workdir": "work",

    # Chapters whose title starts with this marker are always chapter 0
    "front_matter_marker": "Front Matter",

    # Sections the site lists but never serves; a failed download of one of
    # these prunes it from the manual instead of aborting the run
    "unavailable_sections": [
        "Log of Temporary Revisions",
        "33-40-07 Step Lights",
    ],

    "toc_encoding": "cp1250",
    "request_timeout": 60,

    # External tools
    "pdftops": "pdftops",
    "ghostscript": "gs",
}
# You can add more manual configurations here
# SR20_AMM_CONFIG = dict(
#     SR22_AMM_CONFIG,
#     title="SR20 Aircraft Maintenance Manual",
#     description="Assemble the SR20 Aircraft Maintenance Manual",
#     default_toc_url="<URL of the SR20 AMM table of contents frame>",
# )

# Available configurations
MANUAL_CONFIGS = {
    "sr22-amm": SR22_AMM_CONFIG,
    # "sr20-amm": SR20_AMM_CONFIG,
}

# Default configuration (can be changed to switch between different manuals)
DEFAULT_CONFIG = SR22_AMM_CONFIG


def get_config(manual_name=None):
    """Get configuration for a specific manual."""
    if manual_name and manual_name in MANUAL_CONFIGS:
        return MANUAL_CONFIGS[manual_name]
    return DEFAULT_CONFIG
