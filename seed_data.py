"""
Sample test seeder for local development.
Loads a small set of IELTS, Checkpoint and ESL practice tests.

Usage:
    python seed_data.py
"""

import logging
from typing import Optional

from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel

from exam_practice.database import engine as default_engine
from exam_practice.logging_config import configure_logging
from exam_practice.repositories import SqlTestRepository
from exam_practice.schemas import PracticeTestIn
from exam_practice.services.test_service import create_test

logger = logging.getLogger("exam_practice.seed")

SAMPLE_TESTS = [
    {
        "id": "ielts-reading-1",
        "category": "IELTS",
        "title": "IELTS Reading Practice - Academic",
        "description": "Practice reading comprehension with academic passages",
        "duration": 20,
        "difficulty": "Intermediate",
        "questions": [
            {
                "id": "q1",
                "type": "multiple-choice",
                "question": "What is the main idea of the passage about climate change?",
                "options": [
                    "Climate change is not a serious problem",
                    "Human activities are the primary cause of climate change",
                    "Climate has always changed naturally",
                    "Scientists disagree about climate change",
                ],
                "correctAnswer": "Human activities are the primary cause of climate change",
                "explanation": "The passage states that human activities, particularly carbon "
                "emissions, are the main driver of recent climate change.",
            },
            {
                "id": "q2",
                "type": "true-false",
                "question": "According to the text, renewable energy sources produce zero carbon emissions.",
                "correctAnswer": "True",
                "explanation": "Solar and wind power produce minimal to zero carbon emissions.",
            },
            {
                "id": "q3",
                "type": "fill-blank",
                "question": "The Paris Agreement aims to limit global temperature rise to _____ "
                "degrees Celsius above pre-industrial levels.",
                "correctAnswer": "1.5",
                "explanation": "The goal is well below 2°C, preferably 1.5°C.",
            },
        ],
    },
    {
        "id": "checkpoint-b2-1",
        "category": "Checkpoint",
        "title": "Checkpoint B2 First - Grammar & Vocabulary",
        "description": "Test your grammar and vocabulary at B2 level",
        "duration": 15,
        "difficulty": "Intermediate",
        "questions": [
            {
                "id": "q1",
                "type": "multiple-choice",
                "question": "I wish I _____ more time to study yesterday.",
                "options": ["have", "had", "had had", "have had"],
                "correctAnswer": "had had",
                "explanation": "We use 'wish + past perfect' to express regret about past situations.",
            },
            {
                "id": "q2",
                "type": "multiple-choice",
                "question": "By the time we arrived, the movie _____ already _____.",
                "options": ["has / started", "had / started", "was / starting", "is / starting"],
                # older tests store the option index
                "correctAnswer": 1,
                "explanation": "Past perfect is used for an action completed before another past action.",
            },
            {
                "id": "q3",
                "type": "fill-blank",
                "question": "She is good _____ playing the piano.",
                "correctAnswer": "at",
                "explanation": "We use 'good at' to express skill or ability in something.",
            },
        ],
    },
    {
        "id": "esl-basic-1",
        "category": "ESL",
        "title": "ESL Basic Vocabulary",
        "description": "Practice common English vocabulary for daily life",
        "duration": 10,
        "difficulty": "Beginner",
        "questions": [
            {
                "id": "q1",
                "type": "multiple-choice",
                "question": "What do you say when you meet someone for the first time?",
                "options": ["Goodbye", "Nice to meet you", "See you later", "Take care"],
                "correctAnswer": "Nice to meet you",
                "explanation": "'Nice to meet you' is the standard greeting for a first meeting.",
            },
            {
                "id": "q2",
                "type": "multiple-choice",
                "question": "Which word means 'very big'?",
                "options": ["tiny", "small", "huge", "little"],
                "correctAnswer": "huge",
                "explanation": "'Huge' means extremely large or big.",
            },
            {
                "id": "q3",
                "type": "fill-blank",
                "question": "I _____ to school every day. (go)",
                "correctAnswer": "go",
                "explanation": "For daily routines with 'I', we use the base form of the verb.",
            },
        ],
    },
]


def seed_database(engine: Optional[Engine] = None) -> int:
    """Insert the sample tests that are not stored yet; returns how many were added."""
    engine = engine or default_engine
    SQLModel.metadata.create_all(engine)

    added = 0
    with Session(engine) as session:
        repository = SqlTestRepository(session)
        for raw in SAMPLE_TESTS:
            if repository.get(raw["id"]) is not None:
                logger.info("Test %s already present, skipping", raw["id"])
                continue
            create_test(repository, PracticeTestIn.model_validate(raw), created_by="seed")
            added += 1
    logger.info("Seeded %s sample tests", added)
    return added


if __name__ == "__main__":
    configure_logging()
    seed_database()
