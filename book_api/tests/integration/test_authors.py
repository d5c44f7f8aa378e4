"""
Integration tests of the author routes, including books nested under an author
"""

import pytest
from httpx import AsyncClient

from book_api.tests.conftest import HUXLEY, ORWELL

pytestmark = pytest.mark.asyncio


async def test_orwell_workflow(async_client: AsyncClient, auth_headers: dict):
    """Create an author and a book, delete the author, the book is gone"""
    response = await async_client.post("/api/authors", json=ORWELL, headers=auth_headers)
    assert response.status_code == 201, response.text
    author = response.json()
    assert author["id"] > 0
    assert author["name"] == "George Orwell"
    assert author["dateOfBirth"] == "1903-06-25"
    assert author["books"] == []

    response = await async_client.post(
        f"/api/authors/{author['id']}/books",
        json={"title": "1984", "publishDate": "1949-06-08"},
        headers=auth_headers,
    )
    assert response.status_code == 201, response.text
    book = response.json()
    assert book["authorId"] == author["id"]
    assert book["publishDate"] == "1949-06-08"

    response = await async_client.delete(f"/api/authors/{author['id']}", headers=auth_headers)
    assert response.status_code == 200, response.text
    assert response.json() == {"message": "Author deleted successfully"}

    response = await async_client.get(f"/api/books/{book['id']}", headers=auth_headers)
    assert response.status_code == 404, response.text


async def test_create_author_sets_location(async_client: AsyncClient, auth_headers: dict):
    response = await async_client.post("/api/authors", json=ORWELL, headers=auth_headers)
    assert response.status_code == 201
    assert response.headers["location"].endswith(f"/api/authors/{response.json()['id']}")


@pytest.mark.parametrize(
    "payload",
    [
        {"bio": "no name", "dateOfBirth": "1903-06-25"},
        {"name": "", "dateOfBirth": "1903-06-25"},
        {"name": "No Birthday"},
        {"name": "Bad Date", "dateOfBirth": "25/06/1903"},
    ],
)
async def test_create_author_validation(async_client: AsyncClient, auth_headers: dict, payload: dict):
    response = await async_client.post("/api/authors", json=payload, headers=auth_headers)
    assert response.status_code == 400, response.text
    assert response.json()["error_code"] == "validation_error"


async def test_list_authors_with_books(async_client: AsyncClient, auth_headers: dict, author: dict, book: dict):
    await async_client.post("/api/authors", json=HUXLEY, headers=auth_headers)

    response = await async_client.get("/api/authors", headers=auth_headers)

    assert response.status_code == 200
    authors = response.json()
    assert [a["name"] for a in authors] == ["George Orwell", "Aldous Huxley"]
    assert [b["id"] for b in authors[0]["books"]] == [book["id"]]
    assert authors[1]["books"] == []


async def test_get_author(async_client: AsyncClient, auth_headers: dict, author: dict, book: dict):
    response = await async_client.get(f"/api/authors/{author['id']}", headers=auth_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["bio"] == "English novelist"
    assert data["books"][0]["title"] == "1984"


async def test_get_missing_author(async_client: AsyncClient, auth_headers: dict):
    response = await async_client.get("/api/authors/999", headers=auth_headers)
    assert response.status_code == 404
    assert response.json()["message"] == "Author not found"


async def test_get_author_with_non_integer_id(async_client: AsyncClient, auth_headers: dict):
    response = await async_client.get("/api/authors/abc", headers=auth_headers)
    assert response.status_code == 400


async def test_update_author(async_client: AsyncClient, auth_headers: dict, author: dict):
    """PUT replaces every mutable field"""
    payload = {"id": author["id"], "name": "Eric Arthur Blair", "dateOfBirth": "1903-06-25"}

    response = await async_client.put(f"/api/authors/{author['id']}", json=payload, headers=auth_headers)
    assert response.status_code == 204, response.text
    assert response.content == b""

    data = (await async_client.get(f"/api/authors/{author['id']}", headers=auth_headers)).json()
    assert data["name"] == "Eric Arthur Blair"
    assert data["bio"] == ""


async def test_update_author_id_mismatch(async_client: AsyncClient, auth_headers: dict, author: dict):
    payload = {"id": author["id"] + 1, "name": "Someone Else", "dateOfBirth": "1903-06-25"}

    response = await async_client.put(f"/api/authors/{author['id']}", json=payload, headers=auth_headers)

    assert response.status_code == 400
    assert response.json()["message"] == "Author ID mismatch"
    data = (await async_client.get(f"/api/authors/{author['id']}", headers=auth_headers)).json()
    assert data["name"] == "George Orwell"


async def test_update_missing_author(async_client: AsyncClient, auth_headers: dict):
    payload = {"id": 999, "name": "Nobody", "dateOfBirth": "1903-06-25"}
    response = await async_client.put("/api/authors/999", json=payload, headers=auth_headers)
    assert response.status_code == 404


async def test_delete_missing_author(async_client: AsyncClient, auth_headers: dict):
    response = await async_client.delete("/api/authors/999", headers=auth_headers)
    assert response.status_code == 404


async def test_delete_author_removes_only_its_books(async_client: AsyncClient, auth_headers: dict):
    orwell = (await async_client.post("/api/authors", json=ORWELL, headers=auth_headers)).json()
    huxley = (await async_client.post("/api/authors", json=HUXLEY, headers=auth_headers)).json()
    orwell_books = []
    for title in ("1984", "Animal Farm"):
        response = await async_client.post(
            f"/api/authors/{orwell['id']}/books",
            json={"title": title, "publishDate": "1945-08-17"},
            headers=auth_headers,
        )
        orwell_books.append(response.json()["id"])
    huxley_book = (
        await async_client.post(
            f"/api/authors/{huxley['id']}/books",
            json={"title": "Brave New World", "publishDate": "1932-01-01"},
            headers=auth_headers,
        )
    ).json()

    response = await async_client.delete(f"/api/authors/{orwell['id']}", headers=auth_headers)
    assert response.status_code == 200

    for book_id in orwell_books:
        response = await async_client.get(f"/api/books/{book_id}", headers=auth_headers)
        assert response.status_code == 404
    response = await async_client.get(f"/api/books/{huxley_book['id']}", headers=auth_headers)
    assert response.status_code == 200


# Nested books


async def test_create_book_for_missing_author(async_client: AsyncClient, auth_headers: dict):
    """Nothing is written when the author does not exist"""
    response = await async_client.post(
        "/api/authors/999/books", json={"title": "Ghost", "publishDate": "2000-01-01"}, headers=auth_headers
    )

    assert response.status_code == 404
    assert response.json()["message"] == "Author not found"
    books = (await async_client.get("/api/books", headers=auth_headers)).json()
    assert books == []


async def test_create_book_for_author_ignores_author_in_body(
    async_client: AsyncClient, auth_headers: dict, author: dict
):
    response = await async_client.post(
        f"/api/authors/{author['id']}/books",
        json={"title": "Animal Farm", "publishDate": "1945-08-17", "authorId": 999},
        headers=auth_headers,
    )
    assert response.status_code == 201
    assert response.json()["authorId"] == author["id"]
    assert response.headers["location"].endswith(f"/api/authors/{author['id']}/books/{response.json()['id']}")


async def test_create_book_for_author_validation(async_client: AsyncClient, auth_headers: dict, author: dict):
    response = await async_client.post(
        f"/api/authors/{author['id']}/books", json={"publishDate": "1945-08-17"}, headers=auth_headers
    )
    assert response.status_code == 400


async def test_get_books_for_author(async_client: AsyncClient, auth_headers: dict, author: dict, book: dict):
    response = await async_client.get(f"/api/authors/{author['id']}/books", headers=auth_headers)

    assert response.status_code == 200
    books = response.json()
    assert len(books) == 1
    assert books[0]["id"] == book["id"]
    assert books[0]["author"]["name"] == "George Orwell"


async def test_get_books_for_missing_author(async_client: AsyncClient, auth_headers: dict):
    response = await async_client.get("/api/authors/999/books", headers=auth_headers)
    assert response.status_code == 404


async def test_get_book_for_author(async_client: AsyncClient, auth_headers: dict, author: dict, book: dict):
    response = await async_client.get(f"/api/authors/{author['id']}/books/{book['id']}", headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["title"] == "1984"
    assert response.json()["author"]["id"] == author["id"]


async def test_get_book_of_another_author(async_client: AsyncClient, auth_headers: dict, book: dict):
    other = (await async_client.post("/api/authors", json=HUXLEY, headers=auth_headers)).json()

    response = await async_client.get(f"/api/authors/{other['id']}/books/{book['id']}", headers=auth_headers)

    assert response.status_code == 404
    assert response.json()["message"] == "Book not found for this author"


async def test_update_book_for_author(async_client: AsyncClient, auth_headers: dict, author: dict, book: dict):
    response = await async_client.put(
        f"/api/authors/{author['id']}/books/{book['id']}",
        json={"title": "Nineteen Eighty-Four", "publishDate": "1949-06-08"},
        headers=auth_headers,
    )
    assert response.status_code == 204, response.text

    data = (await async_client.get(f"/api/books/{book['id']}", headers=auth_headers)).json()
    assert data["title"] == "Nineteen Eighty-Four"


async def test_update_book_for_missing_author(async_client: AsyncClient, auth_headers: dict, book: dict):
    response = await async_client.put(
        f"/api/authors/999/books/{book['id']}",
        json={"title": "Nineteen Eighty-Four", "publishDate": "1949-06-08"},
        headers=auth_headers,
    )
    assert response.status_code == 404
    assert response.json()["message"] == "Author not found"


async def test_update_missing_book_for_author(async_client: AsyncClient, auth_headers: dict, author: dict):
    response = await async_client.put(
        f"/api/authors/{author['id']}/books/999",
        json={"title": "Nothing", "publishDate": "1949-06-08"},
        headers=auth_headers,
    )
    assert response.status_code == 404
    assert response.json()["message"] == "Book not found for this author"


async def test_delete_book_for_author(async_client: AsyncClient, auth_headers: dict, author: dict, book: dict):
    url = f"/api/authors/{author['id']}/books/{book['id']}"

    response = await async_client.delete(url, headers=auth_headers)
    assert response.status_code == 200
    assert response.json() == {"message": "Book deleted successfully"}

    response = await async_client.delete(url, headers=auth_headers)
    assert response.status_code == 404
    assert (await async_client.get(f"/api/authors/{author['id']}", headers=auth_headers)).status_code == 200
