"""
评论API
"""


async def test_create_and_list_comments(client, seed, headers):
    author = await seed.user("author")
    reader = await seed.user("reader")
    article_id = await seed.article(author)

    first = await client.post(
        f"/api/articles/{article_id}/comments", json={"content": "first!"}, headers=headers(reader)
    )
    await client.post(
        f"/api/articles/{article_id}/comments", json={"content": "second"}, headers=headers(author)
    )
    response = await client.get(f"/api/articles/{article_id}/comments")

    assert first.status_code == 201
    assert first.json()["data"]["user"] == {"id": reader, "name": "reader"}
    data = response.json()["data"]
    assert [c["content"] for c in data["comments"]] == ["first!", "second"]
    assert data["pagination"]["totalItems"] == 2


async def test_comments_on_missing_article_are_404(client, seed, headers):
    user = await seed.user()

    listed = await client.get("/api/articles/404/comments")
    created = await client.post("/api/articles/404/comments", json={"content": "hi"}, headers=headers(user))

    assert listed.status_code == 404
    assert created.status_code == 404


async def test_delete_comment_permissions(client, seed, headers):
    author = await seed.user("author")
    reader = await seed.user("reader")
    stranger = await seed.user("stranger")
    article_id = await seed.article(author)
    created = await client.post(
        f"/api/articles/{article_id}/comments", json={"content": "hello"}, headers=headers(reader)
    )
    comment_id = created.json()["data"]["id"]

    forbidden = await client.delete(f"/api/comments/{comment_id}", headers=headers(stranger))
    allowed = await client.delete(f"/api/comments/{comment_id}", headers=headers(author))
    gone = await client.delete(f"/api/comments/{comment_id}", headers=headers(author))

    assert forbidden.status_code == 403
    assert allowed.status_code == 204
    assert gone.status_code == 404


async def test_deleting_article_removes_its_comments(client, seed, headers):
    author = await seed.user()
    article_id = await seed.article(author)
    created = await client.post(
        f"/api/articles/{article_id}/comments", json={"content": "bye"}, headers=headers(author)
    )
    comment_id = created.json()["data"]["id"]

    await client.delete(f"/api/articles/{article_id}", headers=headers(author))

    response = await client.delete(f"/api/comments/{comment_id}", headers=headers(author))
    assert response.status_code == 404


async def test_out_of_range_ids_are_404(client, seed, headers):
    author = await seed.user()
    huge = 99999999999999999999

    listed = await client.get(f"/api/articles/{huge}/comments")
    created = await client.post(f"/api/articles/{huge}/comments", json={"content": "x"}, headers=headers(author))
    deleted = await client.delete(f"/api/comments/{huge}", headers=headers(author))

    assert listed.status_code == 404
    assert created.status_code == 404
    assert deleted.status_code == 404
