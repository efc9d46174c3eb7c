"""
API Tests for the profile and portfolio endpoints
"""
from httpx import AsyncClient


class TestProfile:

    async def test_get_me(self, seeded_client: AsyncClient, student_headers):
        response = await seeded_client.get("/api/v1/profile/me", headers=student_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["id"] == "stu-1"
        assert data["role"] == "student"

    async def test_update_name(self, seeded_client: AsyncClient, student_headers):
        response = await seeded_client.patch(
            "/api/v1/profile/me", json={"full_name": "  Alice J. Johnson "}, headers=student_headers
        )

        assert response.status_code == 200
        assert response.json()["full_name"] == "Alice J. Johnson"

    async def test_role_cannot_be_changed(self, seeded_client: AsyncClient, student_headers):
        response = await seeded_client.patch(
            "/api/v1/profile/me", json={"role": "admin"}, headers=student_headers
        )

        assert response.status_code == 400
        assert response.json()["details"]["field"] == "role"

        profile = await seeded_client.get("/api/v1/profile/me", headers=student_headers)
        assert profile.json()["role"] == "student"

    async def test_invalid_email(self, seeded_client: AsyncClient, student_headers):
        response = await seeded_client.patch(
            "/api/v1/profile/me", json={"email": "not-an-email"}, headers=student_headers
        )

        assert response.status_code == 400

    async def test_resume_lists_from_text(self, seeded_client: AsyncClient, student_headers):
        response = await seeded_client.put(
            "/api/v1/profile/me/resume",
            json={"skills": "Python, SQL, ,Docker", "github_url": " "},
            headers=student_headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["skills"] == ["Python", "SQL", "Docker"]
        assert data["github_url"] is None

    async def test_custom_links(self, seeded_client: AsyncClient, student_headers):
        added = await seeded_client.post(
            "/api/v1/profile/me/links",
            json={"name": "Blog", "url": "alice.dev"},
            headers=student_headers,
        )
        assert added.status_code == 201
        links = added.json()["custom_links"]
        assert links[-1]["name"] == "Blog"

        removed = await seeded_client.delete(
            f"/api/v1/profile/me/links/{len(links) - 1}", headers=student_headers
        )
        assert removed.status_code == 200
        assert len(removed.json()["custom_links"]) == len(links) - 1

    async def test_remove_missing_link(self, seeded_client: AsyncClient, student_headers):
        response = await seeded_client.delete("/api/v1/profile/me/links/42", headers=student_headers)

        assert response.status_code == 400


class TestPortfolio:

    async def test_portfolio_view(self, seeded_client: AsyncClient, student_headers):
        response = await seeded_client.get("/api/v1/profile/me/portfolio", headers=student_headers)

        assert response.status_code == 200
        stats = response.json()["stats"]
        assert stats["total_certificates"] == 5
        assert stats["approved_certificates"] == 2
        assert stats["progress"] == 40

    async def test_export_html(self, seeded_client: AsyncClient, student_headers):
        response = await seeded_client.get("/api/v1/profile/me/portfolio/export", headers=student_headers)

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/html")
        assert "window.print()" in response.text
        assert "Alice Johnson" in response.text

    async def test_export_text(self, seeded_client: AsyncClient, student_headers):
        response = await seeded_client.get(
            "/api/v1/profile/me/portfolio/export", params={"format": "text"}, headers=student_headers
        )

        assert response.status_code == 200
        assert 'filename="alice-johnson-portfolio.txt"' in response.headers["content-disposition"]
        assert response.text.startswith("Alice Johnson\n")

    async def test_export_pdf(self, seeded_client: AsyncClient, student_headers):
        response = await seeded_client.get(
            "/api/v1/profile/me/portfolio/export", params={"format": "pdf"}, headers=student_headers
        )

        assert response.status_code == 200
        assert response.headers["content-type"] == "application/pdf"
        assert response.content.startswith(b"%PDF")

    async def test_export_unknown_format(self, seeded_client: AsyncClient, student_headers):
        response = await seeded_client.get(
            "/api/v1/profile/me/portfolio/export", params={"format": "docx"}, headers=student_headers
        )

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"

    async def test_export_non_latin_name(self, seeded_client: AsyncClient, student_headers):
        await seeded_client.patch(
            "/api/v1/profile/me", json={"full_name": "राहुल शर्मा"}, headers=student_headers
        )

        for fmt, ext in (("text", "txt"), ("pdf", "pdf")):
            response = await seeded_client.get(
                "/api/v1/profile/me/portfolio/export", params={"format": fmt}, headers=student_headers
            )

            assert response.status_code == 200
            disposition = response.headers["content-disposition"]
            assert f'filename="portfolio.{ext}"' in disposition
            assert "filename*=UTF-8''%E0%A4%B0" in disposition
