"""
End-to-end tests for the file API.

Covers the operation table: upload, create-folder, folders, list-*,
download-zip, delete-file, delete-folder, plus bearer authorization and
the error -> status code mapping.
"""

import io
import tempfile
import unittest
import zipfile
from datetime import datetime, timedelta, timezone
from pathlib import Path

import jwt
from fastapi.testclient import TestClient

from src.personal_cloud.app import create_app
from src.personal_cloud.settings.models import AuthSettings, GlobalSettings


SECRET = "api-test-secret-key-0123456789abcdef"


def _auth_header(secret=SECRET):
    token = jwt.encode(
        {
            "sub": "admin",
            "iss": "cloud",
            "aud": "clients",
            "exp": datetime.now(timezone.utc) + timedelta(hours=1),
        },
        secret,
        algorithm="HS256",
    )
    return {"Authorization": f"Bearer {token}"}


class FilesApiTestCase(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        base = Path(self._tmp.name)
        self.root = base / "Archivos"
        self.scratch = base / "scratch"
        settings = GlobalSettings(
            storage_root=str(self.root),
            scratch_dir=str(self.scratch),
            auth=AuthSettings(secret_key=SECRET, issuer="cloud", audience="clients"),
        )
        self.app = create_app(settings, repo_root=base)
        self.client = TestClient(self.app)
        self.client.headers.update(_auth_header())

    def tearDown(self):
        self.client.close()
        self._tmp.cleanup()

    def _upload(self, name, content, folder=None):
        data = {"folder": folder} if folder is not None else {}
        return self.client.post(
            "/api/files/upload",
            files={"file": (name, io.BytesIO(content), "application/octet-stream")},
            data=data,
        )


class TestAuthorization(FilesApiTestCase):
    def test_missing_token(self):
        response = TestClient(self.app).get("/api/files/folders")
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.headers.get("www-authenticate"), "Bearer")

    def test_bad_token(self):
        response = TestClient(self.app).get("/api/files/folders", headers=_auth_header("wrong-secret-key-0123456789abcdef"))
        self.assertEqual(response.status_code, 401)

    def test_static_files_are_public(self):
        self._upload("hello.txt", b"hi")
        response = TestClient(self.app).get("/Archivos/hello.txt")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.content, b"hi")


class TestUploadAndList(FilesApiTestCase):
    def test_upload_report_to_folder_then_list(self):
        response = self._upload("report.pdf", b"%PDF-1.4", folder="work")
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["nombre"], "report.pdf")
        self.assertEqual(body["carpeta"], "work")

        response = self.client.get("/api/files/list-files", params={"folder": "work"})
        self.assertEqual(response.status_code, 200)
        listing = response.json()
        self.assertEqual(listing["totalArchivos"], 1)
        record = listing["archivos"][0]
        self.assertEqual(record["nombre"], "report.pdf")
        self.assertEqual(record["tipoMime"], "application/pdf")
        self.assertEqual(record["carpeta"], "work")
        self.assertEqual(record["tamaño"], 8)
        self.assertEqual(record["url"], "http://testserver/Archivos/work/report.pdf")

    def test_upload_to_root(self):
        response = self._upload("a.txt", b"abc")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["carpeta"], "(raíz)")

        listing = self.client.get("/api/files/list-root").json()
        self.assertEqual([r["nombre"] for r in listing["archivos"]], ["a.txt"])
        self.assertEqual(listing["archivos"][0]["carpeta"], "(raíz)")

    def test_empty_upload_rejected(self):
        response = self._upload("empty.txt", b"")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(list(self.root.iterdir()), [])

    def test_missing_upload_rejected(self):
        response = self.client.post("/api/files/upload", data={"folder": "work"})
        self.assertEqual(response.status_code, 400)
        self.assertFalse((self.root / "work").exists())

    def test_upload_traversal_rejected(self):
        response = self._upload("a.txt", b"abc", folder="../outside")
        self.assertEqual(response.status_code, 400)
        self.assertFalse((self.root.parent / "outside").exists())

    def test_page_past_end(self):
        for name in ("a.txt", "b.txt", "c.txt"):
            self._upload(name, b"x", folder="work")

        response = self.client.get(
            "/api/files/list-folder",
            params={"folder": "work", "page": 5, "pageSize": 10},
        )

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["archivos"], [])
        self.assertEqual(body["totalArchivos"], 3)
        self.assertEqual(body["totalPaginas"], 1)
        self.assertEqual(body["paginaActual"], 5)

    def test_filter_sort_paginate(self):
        self._upload("big.pdf", b"x" * 30, folder="docs")
        self._upload("small.pdf", b"x" * 5, folder="docs")
        self._upload("notes.txt", b"x" * 10, folder="docs")

        body = self.client.get(
            "/api/files/list-files",
            params={
                "folder": "docs",
                "mimeType": "application/pdf",
                "ext": ".PDF",
                "sortBy": "size",
                "order": "desc",
                "page": 1,
                "pageSize": 1,
            },
        ).json()

        self.assertEqual(body["totalArchivos"], 2)
        self.assertEqual(body["totalPaginas"], 2)
        self.assertEqual([r["nombre"] for r in body["archivos"]], ["big.pdf"])

    def test_listing_errors(self):
        cases = [
            ({"folder": "nope"}, 404),
            ({"folder": ".."}, 400),
            ({"page": 0}, 400),
            ({"pageSize": -1}, 400),
            ({"pageSize": 1001}, 400),
            ({"sortBy": "color"}, 400),
            ({"order": "up"}, 400),
            ({"page": "abc"}, 400),
            ({"pageSize": "1.5"}, 400),
        ]
        for params, status in cases:
            with self.subTest(params=params):
                response = self.client.get("/api/files/list-files", params=params)
                self.assertEqual(response.status_code, status)

    def test_non_integer_paging_is_bad_request_on_every_listing(self):
        self._upload("a.txt", b"a", folder="work")
        for path in ("/api/files/list-files", "/api/files/list-folder", "/api/files/list-root"):
            for params in ({"page": "two"}, {"pageSize": "ten"}):
                with self.subTest(path=path, params=params):
                    response = self.client.get(path, params={"folder": "work", **params})
                    self.assertEqual(response.status_code, 400)
                    self.assertIn("must be an integer", response.json()["detail"])

    def test_list_folder_requires_folder(self):
        response = self.client.get("/api/files/list-folder")
        self.assertEqual(response.status_code, 400)

    def test_list_all(self):
        self._upload("root.txt", b"r")
        self._upload("a.txt", b"a", folder="work")
        self._upload("b.jpg", b"b", folder="photos")

        records = self.client.get("/api/files/list-all").json()

        by_name = {r["nombre"]: r for r in records}
        self.assertEqual(set(by_name), {"root.txt", "a.txt", "b.jpg"})
        self.assertIsNone(by_name["root.txt"]["carpeta"])
        self.assertEqual(by_name["b.jpg"]["carpeta"], "photos")
        self.assertEqual(by_name["b.jpg"]["tipoMime"], "image/jpeg")


class TestFolders(FilesApiTestCase):
    def test_create_and_list_folders(self):
        self.assertEqual(self.client.post("/api/files/create-folder", params={"name": "b"}).status_code, 200)
        self.assertEqual(self.client.post("/api/files/create-folder", params={"name": "a"}).status_code, 200)

        self.assertEqual(self.client.get("/api/files/folders").json(), ["a", "b"])

    def test_create_folder_conflict(self):
        self.client.post("/api/files/create-folder", params={"name": "work"})
        response = self.client.post("/api/files/create-folder", params={"name": "work"})
        self.assertEqual(response.status_code, 409)

    def test_create_folder_invalid(self):
        for name in ("", "..", "a/b"):
            with self.subTest(name=name):
                response = self.client.post("/api/files/create-folder", params={"name": name})
                self.assertEqual(response.status_code, 400)

    def test_delete_folder(self):
        self._upload("a.txt", b"a", folder="work")

        self.assertEqual(self.client.delete("/api/files/delete-folder", params={"folder": "work"}).status_code, 200)
        self.assertFalse((self.root / "work").exists())

        again = self.client.delete("/api/files/delete-folder", params={"folder": "work"})
        self.assertEqual(again.status_code, 404)

    def test_delete_folder_invalid(self):
        response = self.client.delete("/api/files/delete-folder", params={"folder": ".."})
        self.assertEqual(response.status_code, 400)
        self.assertTrue(self.root.exists())


class TestDeleteFile(FilesApiTestCase):
    def test_delete_from_folder(self):
        self._upload("a.txt", b"a", folder="work")
        response = self.client.delete("/api/files/delete-file", params={"nombre": "a.txt", "carpeta": "work"})
        self.assertEqual(response.status_code, 200)
        self.assertFalse((self.root / "work" / "a.txt").exists())

    def test_delete_from_root_aliases(self):
        for alias in (None, "", ".", "null"):
            with self.subTest(alias=alias):
                self._upload("r.txt", b"r")
                params = {"nombre": "r.txt"}
                if alias is not None:
                    params["carpeta"] = alias
                response = self.client.delete("/api/files/delete-file", params=params)
                self.assertEqual(response.status_code, 200)
                self.assertFalse((self.root / "r.txt").exists())

    def test_delete_with_padded_folder(self):
        self._upload("a.txt", b"a", folder="work")

        response = self.client.delete("/api/files/delete-file", params={"nombre": "a.txt", "carpeta": " work "})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["carpeta"], "work")
        self.assertFalse((self.root / "work" / "a.txt").exists())

    def test_delete_file_errors(self):
        cases = [
            ({}, 400),
            ({"nombre": " "}, 400),
            ({"nombre": "../x.txt"}, 400),
            ({"nombre": "a.txt", "carpeta": ".."}, 400),
            ({"nombre": "missing.txt"}, 404),
        ]
        for params, status in cases:
            with self.subTest(params=params):
                response = self.client.delete("/api/files/delete-file", params=params)
                self.assertEqual(response.status_code, status)


class TestDownloadZip(FilesApiTestCase):
    def test_download_zip(self):
        self._upload("a.txt", b"alpha", folder="work")
        self._upload("b.txt", b"bravo", folder="work")

        response = self.client.get("/api/files/download-zip", params={"folder": "work"})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.headers["content-type"], "application/zip")
        self.assertIn("Archivos_work.zip", response.headers["content-disposition"])
        with zipfile.ZipFile(io.BytesIO(response.content)) as zf:
            self.assertEqual(set(zf.namelist()), {"a.txt", "b.txt"})

        # Scratch zip is removed once delivered
        self.assertEqual(list(self.scratch.iterdir()), [])

    def test_download_zip_errors(self):
        self.assertEqual(
            self.client.get("/api/files/download-zip", params={"folder": "nope"}).status_code,
            404,
        )
        self.assertEqual(
            self.client.get("/api/files/download-zip", params={"folder": ".."}).status_code,
            400,
        )
        self.assertEqual(self.client.get("/api/files/download-zip").status_code, 400)


if __name__ == "__main__":
    unittest.main()
