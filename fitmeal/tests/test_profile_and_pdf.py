from datetime import date

from fitmeal.infra import paths
from fitmeal.infra.pdf_utils import generate_meal_plan_pdf, pdf_filename

FIVE_MB = 5 * 1024 * 1024


def upload(client, headers, content, content_type="image/png", filename="me.png"):
    return client.post("/api/profile/upload-image", headers=headers,
                       files={"profileImage": (filename, content, content_type)})


def test_upload_replaces_previous_image(client, make_user, headers_for):
    user = make_user("customer")
    headers = headers_for(user)

    first = upload(client, headers, b"\x89PNG first")
    assert first.status_code == 200, first.text
    first_url = first.json()["data"]["profileImageUrl"]
    first_file = paths.profile_images_dir() / first_url.rsplit("/", 1)[-1]
    assert first_file.exists()

    second = upload(client, headers, b"\xff\xd8 jpeg", content_type="image/jpeg", filename="me.jpg")
    second_url = second.json()["data"]["profileImageUrl"]
    assert second_url.endswith(".jpg")
    assert not first_file.exists()
    assert client.get("/api/profile", headers=headers).json()["data"]["profilePicture"] == second_url


def test_uploaded_image_is_served(client, make_user, headers_for):
    headers = headers_for(make_user("customer"))
    url = upload(client, headers, b"\x89PNG served").json()["data"]["profileImageUrl"]

    resp = client.get(url)
    assert resp.status_code == 200
    assert resp.content == b"\x89PNG served"
    assert resp.headers["content-type"] == "image/png"
    assert client.get("/uploads/profile-images/missing.png").status_code == 404


def test_upload_limits(client, make_user, headers_for):
    headers = headers_for(make_user("customer"))
    assert upload(client, headers, b"x" * FIVE_MB).status_code == 200
    assert upload(client, headers, b"x" * (FIVE_MB + 1)).status_code == 400
    assert upload(client, headers, b"GIF89a", content_type="image/gif", filename="me.gif").status_code == 400
    assert upload(client, headers, b"").status_code == 400


def test_delete_image(client, make_user, headers_for):
    headers = headers_for(make_user("customer"))
    assert client.delete("/api/profile/delete-image", headers=headers).status_code == 400
    upload(client, headers, b"\x89PNG")
    assert client.delete("/api/profile/delete-image", headers=headers).status_code == 200
    assert client.get("/api/profile", headers=headers).json()["data"]["profilePicture"] is None


def test_pdf_filename():
    assert pdf_filename("Jane O'Neil", date(2024, 1, 2)) == "EvoFit_Meal_Plan_jane_o_neil_2024-01-02.pdf"
    assert pdf_filename(None, date(2024, 1, 2)) == "EvoFit_Meal_Plan_meal_plan_2024-01-02.pdf"


def test_generate_pdf_bytes(sample_plan):
    content = generate_meal_plan_pdf(sample_plan, "Jane", orientation="landscape", page_size="Letter")
    assert content.startswith(b"%PDF")
    bare = generate_meal_plan_pdf(sample_plan, include_macro_summary=False, include_shopping_list=False)
    assert bare.startswith(b"%PDF")


def test_export_endpoint_headers(client, make_user, headers_for, sample_plan):
    headers = headers_for(make_user("trainer"))
    resp = client.post("/api/pdf/export", headers=headers, json={
        "mealPlanData": sample_plan, "customerName": "Jane Doe",
        "options": {"includeShoppingList": True, "orientation": "portrait", "pageSize": "A4"}})
    assert resp.status_code == 200
    assert resp.headers["content-type"] == "application/pdf"
    assert resp.headers["cache-control"] == "no-cache"
    disposition = resp.headers["content-disposition"]
    assert disposition.startswith('attachment; filename="EvoFit_Meal_Plan_jane_doe_')
    assert resp.content.startswith(b"%PDF")


def test_export_rejects_invalid_plan(client, make_user, headers_for, sample_plan):
    headers = headers_for(make_user("trainer"))
    bad = {**sample_plan, "dailyCalorieTarget": 100}
    resp = client.post("/api/pdf/export", headers=headers, json={"mealPlanData": bad})
    assert resp.status_code == 400
    assert resp.json()["detail"].startswith("Invalid meal plan data")


def test_export_assigned_plan_access(client, linked_pair, make_user, headers_for, sample_plan):
    trainer, customer = linked_pair
    assignment = client.post(f"/api/trainer/customers/{customer.id}/meal-plans",
                             json={"mealPlanData": sample_plan},
                             headers=headers_for(trainer)).json()["assignment"]
    url = f"/api/pdf/export/meal-plan/{assignment['id']}"

    assert client.post(url, headers=headers_for(customer)).status_code == 200
    assert client.post(url, headers=headers_for(trainer)).status_code == 200
    assert client.post(url, headers=headers_for(make_user("trainer"))).status_code == 404
    assert client.post(url, headers=headers_for(make_user("customer"))).status_code == 404
    assert client.post(url, headers=headers_for(make_user("admin"))).status_code == 501
