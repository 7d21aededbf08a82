"""
批量生成测试文章（本地压测/演示用）

用法: python generate_articles.py 5000
"""
import asyncio
import random
import sys
from datetime import datetime, timedelta

from sqlalchemy import select, insert

from app.core.config import settings
from app.db.database import create_engine_from_url, create_session_factory
from app.models import User, Article, Genre, article_genres

GENRE_NAMES = [
    "Top", "Today", "Bangladesh", "International", "Technology",
    "Science", "Politics", "Sports", "Entertainment", "Health",
    "Business", "Recommended", "Lifestyle", "Education", "Environment",
    "Fashion", "Food", "Travel",
]

WORDS = (
    "lorem ipsum dolor sit amet consectetur adipiscing elit sed do eiusmod tempor "
    "incididunt ut labore et dolore magna aliqua enim ad minim veniam quis nostrud "
    "exercitation ullamco laboris nisi aliquip ex ea commodo consequat"
).split()


def _sentence(word_count: int) -> str:
    words = random.choices(WORDS, k=word_count)
    return " ".join(words).capitalize() + "."


def _paragraphs(count: int) -> str:
    return "\n\n".join(
        " ".join(_sentence(random.randint(6, 14)) for _ in range(random.randint(3, 6)))
        for _ in range(count)
    )


async def ensure_genres(session) -> list:
    """确保固定分类存在，返回分类ID列表"""
    result = await session.execute(select(Genre).where(Genre.name.in_(GENRE_NAMES)))
    existing = {genre.name for genre in result.scalars().all()}
    for name in GENRE_NAMES:
        if name not in existing:
            session.add(Genre(name=name))
    await session.commit()

    result = await session.execute(select(Genre.id).where(Genre.name.in_(GENRE_NAMES)))
    return [row[0] for row in result.all()]


async def generate_fake_articles(num_articles: int, batch_size: int = 1000):
    engine = create_engine_from_url(settings.DATABASE_URL)
    session_factory = create_session_factory(engine)

    try:
        async with session_factory() as session:
            result = await session.execute(select(User.id))
            user_ids = [row[0] for row in result.all()]
            if not user_ids:
                print("❌ 没有用户，请先创建用户")
                return

            genre_ids = await ensure_genres(session)
            total_batches = (num_articles + batch_size - 1) // batch_size
            now = datetime.utcnow()

            for batch in range(total_batches):
                print(f"处理第 {batch + 1}/{total_batches} 批...")
                count = min(batch_size, num_articles - batch * batch_size)

                for _ in range(count):
                    created_at = now - timedelta(days=random.randint(1, 365), seconds=random.randint(0, 86400))
                    article = Article(
                        title=_sentence(random.randint(4, 9)),
                        content=_paragraphs(10),
                        thumbnail=f"https://picsum.photos/seed/{random.randint(1, 10 ** 6)}/640/480",
                        author_id=random.choice(user_ids),
                        total_views=random.randint(0, 10000),
                        created_at=created_at,
                        updated_at=created_at + timedelta(days=random.randint(0, 30)),
                    )
                    session.add(article)
                    await session.flush()

                    links = random.sample(genre_ids, k=random.randint(1, 3))
                    await session.execute(
                        insert(article_genres),
                        [{"article_id": article.id, "genre_id": genre_id} for genre_id in links]
                    )

                await session.commit()
                print(f"✅ 第 {batch + 1} 批完成: {count} 篇")

            print(f"\n🎉 共生成 {num_articles} 篇文章")
    finally:
        await engine.dispose()


if __name__ == "__main__":
    total = int(sys.argv[1]) if len(sys.argv) > 1 else 1000
    asyncio.run(generate_fake_articles(total))
