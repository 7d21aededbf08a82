"""
分类API
"""


async def test_list_genres_with_article_counts(client, seed):
    author = await seed.user()
    tech = await seed.genre("Technology")
    await seed.genre("Art")
    await seed.article(author, genre_ids=[tech])
    await seed.article(author, genre_ids=[tech])

    response = await client.get("/api/genres")

    assert response.status_code == 200
    genres = response.json()["data"]
    assert [g["name"] for g in genres] == ["Art", "Technology"]
    assert [g["articleCount"] for g in genres] == [0, 2]


async def test_get_genre(client, seed):
    genre_id = await seed.genre("Travel")

    found = await client.get(f"/api/genres/{genre_id}")
    missing = await client.get("/api/genres/999")

    assert found.json()["data"]["name"] == "Travel"
    assert missing.status_code == 404


async def test_create_genre(client, seed, headers):
    user = await seed.user()

    response = await client.post("/api/genres", json={"name": " Health "}, headers=headers(user))

    assert response.status_code == 201
    assert response.json()["data"]["name"] == "Health"


async def test_create_duplicate_genre_conflicts(client, seed, headers):
    user = await seed.user()
    await seed.genre("Science")

    response = await client.post("/api/genres", json={"name": "science"}, headers=headers(user))

    assert response.status_code == 409


async def test_create_genre_requires_authentication(client):
    response = await client.post("/api/genres", json={"name": "Food"})
    assert response.status_code == 401


async def test_genre_articles(client, seed):
    author = await seed.user()
    food = await seed.genre("Food")
    await seed.article(author, title="pasta", genre_ids=[food])
    await seed.article(author, title="bridges")

    response = await client.get(f"/api/genres/{food}/articles")
    missing = await client.get("/api/genres/999/articles")

    data = response.json()["data"]
    assert [a["title"] for a in data["articles"]] == ["pasta"]
    assert data["totalItems"] == 1
    assert missing.status_code == 404


async def test_out_of_range_genre_id_is_404(client):
    assert (await client.get("/api/genres/99999999999999999999")).status_code == 404
    assert (await client.get("/api/genres/99999999999999999999/articles")).status_code == 404
