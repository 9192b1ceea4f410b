"""Shared test fixtures for the fleet operations test suite."""

from pathlib import Path

import numpy as np
import pytest


@pytest.fixture
def sample_image() -> np.ndarray:
    """Create a simple synthetic grayscale test image."""
    image = np.zeros((200, 300), dtype=np.uint8)
    image[50:150, 50:250] = 255
    return image


@pytest.fixture
def sample_color_image() -> np.ndarray:
    """Create a simple synthetic RGB test image."""
    image = np.zeros((200, 300, 3), dtype=np.uint8)
    image[50:150, 50:250] = (200, 180, 160)
    return image


@pytest.fixture
def certificate_fields() -> dict[str, str]:
    """Document AI fields read from a Malta certificate of registry."""
    return {
        "Certificate_No": "1100002",
        "No_Year": "536 IN 2023 VALLETTA",
        "Callsign": "9HB9361",
        "OfficialNo": "22106",
        "Name_o_fShip": "BLUE INFINITY ONE",
        "Home_Port": "VALLETTA",
        "Description_of_Vessel": "GRP COMMERCIAL YACHT",
        "When_and_Where_Built": "2019 SUNSEEKER INTERNATIONAL LIMITED, POOLE",
        "Framework": "GRP",
        "HULL_ID": "9074729",
        "Length_overall": "28.06",
        "Particulars_of_Tonnage": "102.04",
        "Main_breadth": "6.55",
        "Depth": "3.12",
        "Propulsion_Power": "2 x 1432 Combined KW 2864",
        "Propulsion": "MOTOR SHIP TWIN SCREW",
        "Number_and_Description_of_Engines": "TWO MTU 12V2000 M96L",
        "Engine_Makers": "MTU FRIEDRICHSHAFEN",
        "Engines_Year_of_Make": "2018",
        "Owners_description": "SOLE OWNER",
        "Owners_residence": "BLUE INFINITY LTD 12 TRIQ IL-BAJJADA",
        "Provisionally_registered_on": "07 July 2025",
        "Registered_on": "10 December 2020",
        "Certificate_issued_this": "10 December 2020",
        "This_certificate_expires_on": "July 2026",
    }


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def config_dir(project_root: Path) -> Path:
    """Return the configs directory path."""
    return project_root / "configs"
