import sys
from pathlib import Path

import pytest

# Ensure `professional_search` is importable when running pytest from the repo root.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from professional_search.models import PlaceResult  # noqa: E402


@pytest.fixture
def make_place():
    def _make_place(**overrides):
        fields = {
            "id": "p1",
            "name": "Clinica Exemplo",
            "address": "Rua A, 123",
            "rating": 4.6,
            "maps_url": "https://maps.google.com/?q=1",
            "clinic_phone": "(73) 99999-0000",
            "whatsapp_url": "https://wa.me/5573999990000",
            "category_id": "fono",
            "category_name": "Fonoaudiologo",
        }
        fields.update(overrides)
        return PlaceResult(**fields)

    return _make_place
