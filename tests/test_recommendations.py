"""
推荐与相关文章
"""
from app.services.recommendation_service import get_recommended_articles, get_related_articles


async def test_recommended_is_ordered_by_views(db, seed):
    author = await seed.user()
    for views in [5, 100, 0, 42, 42]:
        await seed.article(author, views=views)

    articles, total = await get_recommended_articles(db, limit=10, page=1)

    assert total == 5
    views = [a.totalViews for a in articles]
    assert all(a >= b for a, b in zip(views, views[1:]))


async def test_recommended_ties_break_by_newest(db, seed):
    author = await seed.user()
    older = await seed.article(author, views=10, minutes_ago=60)
    newer = await seed.article(author, views=10, minutes_ago=1)

    articles, _ = await get_recommended_articles(db)

    assert [a.id for a in articles] == [newer, older]


async def test_recommended_excludes_article_and_paginates(db, seed):
    author = await seed.user()
    top = await seed.article(author, views=1000)
    for views in range(5):
        await seed.article(author, views=views)

    articles, total = await get_recommended_articles(db, limit=2, page=1, exclude_article_id=top)
    second_page, _ = await get_recommended_articles(db, limit=2, page=3, exclude_article_id=top)

    assert total == 5
    assert top not in [a.id for a in articles]
    assert [a.totalViews for a in articles] == [4, 3]
    assert [a.totalViews for a in second_page] == [0]


async def test_related_shares_at_least_one_genre(db, seed):
    author = await seed.user()
    tech = await seed.genre("Tech")
    science = await seed.genre("Science")
    sports = await seed.genre("Sports")
    a = await seed.article(author, genre_ids=[tech, science], views=50)
    b = await seed.article(author, genre_ids=[science], views=10)
    c = await seed.article(author, genre_ids=[sports], views=999)
    d = await seed.article(author, genre_ids=[tech, science], views=20)

    related = await get_related_articles(db, a, limit=5)
    ids = [r.id for r in related]

    assert ids == [d, b]
    assert c not in ids
    assert a not in ids


async def test_related_respects_limit(db, seed):
    author = await seed.user()
    tech = await seed.genre("Tech")
    reference = await seed.article(author, genre_ids=[tech])
    for views in range(8):
        await seed.article(author, genre_ids=[tech], views=views)

    related = await get_related_articles(db, reference)

    assert len(related) == 5
    assert [r.totalViews for r in related] == [7, 6, 5, 4, 3]


async def test_related_on_missing_article_is_empty(db):
    assert await get_related_articles(db, 12345) == []


async def test_related_on_article_without_genres_is_empty(db, seed):
    author = await seed.user()
    lonely = await seed.article(author)
    await seed.article(author)

    assert await get_related_articles(db, lonely) == []
