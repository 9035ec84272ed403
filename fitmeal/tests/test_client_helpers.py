import unittest

import httpx
import pytest

from fitmeal.client import endpoints
from fitmeal.client.api_client import ApiClient
from fitmeal.client.errors import ValidationError
from fitmeal.client.pdf_export import export_meal_plan_pdf
from fitmeal.client.profile import get_initials
from fitmeal.client.query_cache import QueryCache
from fitmeal.client.token_store import MemoryTokenStore
from fitmeal.client.uploads import upload_profile_image, validate_image_upload

FIVE_MB = 5 * 1024 * 1024


class TestUploadValidation(unittest.TestCase):

    def test_exactly_five_megabytes_is_accepted(self):
        validate_image_upload("image/png", FIVE_MB)

    def test_one_byte_over_is_rejected(self):
        with self.assertRaises(ValidationError):
            validate_image_upload("image/png", FIVE_MB + 1)

    def test_only_jpeg_png_and_webp(self):
        for content_type in ("image/jpeg", "image/png", "image/webp"):
            validate_image_upload(content_type, 10)
        for content_type in ("image/gif", "application/pdf", "text/plain"):
            with self.assertRaises(ValidationError):
                validate_image_upload(content_type, 10)


class TestInitials(unittest.TestCase):

    def test_initials(self):
        self.assertEqual(get_initials("john.doe@example.com"), "JD")
        self.assertEqual(get_initials("single@example.com"), "S")
        self.assertEqual(get_initials("anna.maria.de.souza@example.com"), "AMD")
        self.assertEqual(get_initials("a..b@example.com"), "AB")


class TestEndpoints(unittest.TestCase):

    def test_recipe_url_by_role(self):
        self.assertEqual(endpoints.recipe_url("admin", "r1"), "/api/admin/recipes/r1")
        self.assertEqual(endpoints.recipe_url("trainer", "r1"), "/api/recipes/r1")
        self.assertEqual(endpoints.recipe_url("customer", "r1"), "/api/recipes/r1")

    def test_protocol_create_url_by_role(self):
        self.assertEqual(endpoints.protocol_create_url("admin"), "/api/admin/protocols")
        self.assertEqual(endpoints.protocol_create_url("trainer"), "/api/trainer/protocols")

    def test_customer_detail_urls(self):
        self.assertEqual(endpoints.customer_goals_url("c1"), "/api/trainer/customers/c1/goals")
        self.assertEqual(endpoints.customer_meal_plan_url("c1", "a1"), "/api/trainer/customers/c1/meal-plans/a1")


class TestQueryCache(unittest.TestCase):

    def test_invalidate_drops_keys_under_prefix(self):
        cache = QueryCache()
        cache.set(("trainer", "customer", "c1", "goals"), [1])
        cache.set(("trainer", "customer", "c1", "meal-plans"), [2])
        cache.set(("trainer", "customer", "c2", "goals"), [3])

        self.assertEqual(cache.invalidate(("trainer", "customer", "c1")), 2)
        self.assertNotIn(("trainer", "customer", "c1", "goals"), cache)
        self.assertEqual(cache.get(("trainer", "customer", "c2", "goals")), [3])
        self.assertEqual(cache.invalidate(), 1)


def _transport(calls):
    def handler(request):
        calls.append(request)
        return httpx.Response(200, json={"status": "success", "data": {"profileImageUrl": "/uploads/x.png"}})
    return httpx.MockTransport(handler)


@pytest.mark.asyncio
async def test_bad_upload_makes_no_request():
    calls = []
    client = ApiClient("http://test", MemoryTokenStore("t"), transport=_transport(calls))
    with pytest.raises(ValidationError):
        await upload_profile_image(client, "me.gif", b"GIF89a", "image/gif")
    with pytest.raises(ValidationError):
        await upload_profile_image(client, "me.png", b"x" * (FIVE_MB + 1), "image/png")
    assert calls == []
    await client.aclose()


@pytest.mark.asyncio
async def test_upload_sends_multipart_profile_image():
    calls = []
    client = ApiClient("http://test", MemoryTokenStore("t"), transport=_transport(calls))
    data = await upload_profile_image(client, "me.png", b"\x89PNG...", "image/png")
    assert data["profileImageUrl"] == "/uploads/x.png"
    assert calls[0].headers["content-type"].startswith("multipart/form-data; boundary=")
    assert b'name="profileImage"' in calls[0].content
    await client.aclose()


@pytest.mark.asyncio
async def test_export_meal_plan_pdf_writes_file(tmp_path):
    def handler(request):
        return httpx.Response(200, content=b"%PDF-1.4", headers={
            "Content-Disposition": 'attachment; filename="EvoFit_Meal_Plan_jane_2024-01-02.pdf"'})

    client = ApiClient("http://test", MemoryTokenStore("t"), transport=httpx.MockTransport(handler))
    path = await export_meal_plan_pdf(client, tmp_path / "pdfs", meal_plan_data={"planName": "Cut"},
                                      customer_name="Jane")
    assert path.name == "EvoFit_Meal_Plan_jane_2024-01-02.pdf"
    assert path.read_bytes() == b"%PDF-1.4"

    with pytest.raises(ValidationError):
        await export_meal_plan_pdf(client, tmp_path)
    await client.aclose()
