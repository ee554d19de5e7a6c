"""
ingest_brand_vectors management command tests.
"""

from io import StringIO
from unittest.mock import patch
from uuid import uuid4

import pytest
from django.core.management import CommandError, call_command

from lumora.core.models import Brand

INGEST_PATH = "lumora.brandbrain.management.commands.ingest_brand_vectors.ingest_brand_profile"


@pytest.mark.django_db
class TestIngestBrandVectorsCommand:
    @patch(INGEST_PATH, return_value=4)
    def test_ingests_every_brand(self, mock_ingest, brand):
        Brand.objects.create(name="Acme Tea")
        out = StringIO()

        call_command("ingest_brand_vectors", stdout=out)

        assert mock_ingest.call_count == 2
        output = out.getvalue()
        assert "Acme Tea: 4 entries" in output
        assert "Ingested 2 brands (8 entries), 0 failed" in output

    @patch(INGEST_PATH, return_value=3)
    def test_filters_by_brand_id(self, mock_ingest, brand):
        Brand.objects.create(name="Acme Tea")
        out = StringIO()

        call_command("ingest_brand_vectors", "--brand-id", str(brand.id), stdout=out)

        mock_ingest.assert_called_once()
        assert mock_ingest.call_args.args[0] == brand

    @patch(INGEST_PATH, side_effect=RuntimeError("vector store down"))
    def test_failures_are_counted(self, _mock_ingest, brand):
        out = StringIO()

        call_command("ingest_brand_vectors", stdout=out)

        output = out.getvalue()
        assert "Northwind Coffee: failed (vector store down)" in output
        assert "Ingested 0 brands (0 entries), 1 failed" in output

    def test_unknown_brand_id(self, db):
        with pytest.raises(CommandError, match="No matching brands"):
            call_command("ingest_brand_vectors", "--brand-id", str(uuid4()), stdout=StringIO())
