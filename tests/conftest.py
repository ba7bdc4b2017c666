import sys
from pathlib import Path

import pytest

FIXTURES = Path(__file__).parent / "fixtures"

if str(FIXTURES) not in sys.path:
    sys.path.insert(0, str(FIXTURES))


@pytest.fixture
def settings(tmp_path):
    from apidocx.config import DocxSettings

    return DocxSettings(
        title="Demo API",
        version="2.0.0",
        description="Demo application",
        output_dir=tmp_path / "site",
        scan={"base_packages": ["demo_app"]},
    )
