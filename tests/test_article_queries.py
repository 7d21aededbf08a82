"""
文章列表查询
"""
import pytest

from app.services.article_service import list_articles


async def test_list_orders_newest_first_and_paginates(db, seed):
    author = await seed.user()
    ids = [await seed.article(author, title=f"a{i}", minutes_ago=i) for i in range(5)]

    page1, total = await list_articles(db, page=1, limit=2)
    page3, _ = await list_articles(db, page=3, limit=2)

    assert total == 5
    assert [a.id for a in page1] == ids[:2]
    assert [a.id for a in page3] == ids[4:]
    assert len(page1) <= 2


async def test_list_rejects_invalid_page(db):
    with pytest.raises(ValueError):
        await list_articles(db, page=0, limit=10)


async def test_query_matches_title_or_content_case_insensitive(db, seed):
    author = await seed.user()
    in_title = await seed.article(author, title="Python Tips", content="nothing")
    in_content = await seed.article(author, title="Other", content="all about PYTHON")
    await seed.article(author, title="Rust", content="borrow checker")

    articles, total = await list_articles(db, query="python")

    assert total == 2
    assert {a.id for a in articles} == {in_title, in_content}


async def test_author_filter_is_exact(db, seed):
    alice = await seed.user("alice")
    bob = await seed.user("bob")
    mine = await seed.article(alice)
    await seed.article(bob)

    articles, total = await list_articles(db, author_id=alice)

    assert total == 1
    assert articles[0].id == mine
    assert articles[0].author.name == "alice"


async def test_genre_filter_counts_each_article_once(db, seed):
    author = await seed.user()
    tech = await seed.genre("Tech")
    science = await seed.genre("Science")
    sports = await seed.genre("Sports")
    both = await seed.article(author, genre_ids=[tech, science])
    only_science = await seed.article(author, genre_ids=[science])
    await seed.article(author, genre_ids=[sports])

    articles, total = await list_articles(db, genre_ids=[tech, science])

    assert total == 2
    assert {a.id for a in articles} == {both, only_science}
    both_record = next(a for a in articles if a.id == both)
    assert [g.name for g in both_record.genres] == ["Tech", "Science"]


async def test_article_id_excludes_reference_and_matches_its_genres(db, seed):
    author = await seed.user()
    tech = await seed.genre("Tech")
    sports = await seed.genre("Sports")
    reference = await seed.article(author, genre_ids=[tech])
    similar = await seed.article(author, genre_ids=[tech, sports])
    await seed.article(author, genre_ids=[sports])

    articles, total = await list_articles(db, article_id=reference)

    assert total == 1
    assert [a.id for a in articles] == [similar]


async def test_article_id_without_genres_yields_empty_page(db, seed):
    author = await seed.user()
    reference = await seed.article(author)
    await seed.article(author)

    articles, total = await list_articles(db, article_id=reference)

    assert articles == []
    assert total == 0


async def test_missing_reference_article_adds_no_constraint(db, seed):
    author = await seed.user()
    await seed.article(author)
    await seed.article(author)

    _, total = await list_articles(db, article_id=9999)

    assert total == 2
