# messenger/infrastructure/demo_data.py
import logging
from datetime import timedelta

from sqlalchemy import select

from messenger.domain.entities import ChatType, Language, pair_key, utcnow
from messenger.infrastructure.models import Chat, Message, Participant, Profile, new_id

logger = logging.getLogger("MessengerAPI.demo")

DEMO_PROFILES = [
    ("demo_alex_001", "alex_dev", "Alex Johnson",
     "Full-stack developer | Open source enthusiast", Language.EN, True),
    ("demo_maria_002", "maria_design", "Maria Petrova",
     "UI/UX Designer | Creating beautiful experiences", Language.RU, True),
    ("demo_james_003", "james_pm", "James Wilson",
     "Product Manager | Building the future", Language.EN, False),
    ("demo_anna_004", "anna_code", "Anna Smirnova",
     "Backend engineer | Coffee lover", Language.RU, True),
]

# (other participant, [(sender, content, minutes ago)])
DEMO_CHATS = [
    (
        "demo_maria_002",
        [
            ("demo_alex_001", "Hey Maria! How's the new design coming along?", 120),
            ("demo_maria_002",
             "Hi Alex! It's going great! Just finished the dark theme mockups.", 60),
            ("demo_alex_001",
             "Awesome! Can't wait to see them. The dark theme sounds perfect!", 30),
        ],
    ),
    (
        "demo_james_003",
        [
            ("demo_james_003", "Alex, do we have the sprint planning meeting today?", 120),
            ("demo_alex_001", "Yes! 3 PM. I'll send the agenda shortly.", 90),
        ],
    ),
]


async def init_demo_data(session_factory) -> bool:
    """Seed demo profiles and chats into an empty database.

    Returns False when profiles already exist and nothing was written.
    """
    async with session_factory() as session:
        existing = await session.scalar(select(Profile.user_id).limit(1))
        if existing:
            logger.info("Database already seeded, skipping demo data")
            return False

        now = utcnow()
        for user_id, tag, display_name, bio, language, is_online in DEMO_PROFILES:
            session.add(
                Profile(
                    user_id=user_id,
                    tag=tag,
                    display_name=display_name,
                    bio=bio,
                    language=language.value,
                    is_online=is_online,
                    last_seen=now,
                )
            )

        owner_id = DEMO_PROFILES[0][0]
        for other_id, messages in DEMO_CHATS:
            chat = Chat(
                id=new_id(),
                type=ChatType.PRIVATE.value,
                private_key=pair_key(owner_id, other_id),
                created_at=now - timedelta(hours=3),
                updated_at=now - timedelta(minutes=messages[-1][2]),
            )
            session.add(chat)
            for user_id in (owner_id, other_id):
                session.add(
                    Participant(
                        id=new_id(),
                        chat_id=chat.id,
                        user_id=user_id,
                        joined_at=chat.created_at,
                    )
                )
            for sender_id, content, minutes_ago in messages:
                session.add(
                    Message(
                        id=new_id(),
                        chat_id=chat.id,
                        sender_id=sender_id,
                        content=content,
                        created_at=now - timedelta(minutes=minutes_ago),
                    )
                )

        await session.commit()
        logger.info(f"Seeded {len(DEMO_PROFILES)} demo profiles and {len(DEMO_CHATS)} chats")
        return True
