"""
Initial data loader.

Inserts the quiz questions, a coach roster and a week of hourly slots on
first start. Nothing is inserted when coaches or quiz questions already
exist.
"""

from datetime import datetime, timedelta, timezone
import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from database.models import (
    Coach,
    QuestionType,
    QuizQuestion,
    SeniorityLevel,
    Slot,
    SlotStatus,
)

logger = logging.getLogger(__name__)


def _options(*pairs):
    return [{"value": value, "label": label} for value, label in pairs]


# (question_id, type, text, options, hindi text, hindi options, branching rules)
QUESTIONS = [
    (
        "family_history", QuestionType.RADIO,
        "Does anyone in your family have hair loss?",
        _options(("no", "No"), ("maternal", "Yes, mother's side"), ("paternal", "Yes, father's side"), ("both", "Both sides")),
        "क्या आपके परिवार में किसी को बाल झड़ने की समस्या है?",
        _options(("no", "नहीं"), ("maternal", "हाँ, माँ की तरफ"), ("paternal", "हाँ, पिता की तरफ"), ("both", "दोनों तरफ")),
        None,
    ),
    (
        "age", QuestionType.NUMBER,
        "How old are you?",
        None,
        "आपकी उम्र क्या है?",
        None,
        None,
    ),
    (
        "medical_history", QuestionType.CHECKBOX,
        "Have you been diagnosed with any of these conditions?",
        _options(("pcos", "PCOS"), ("thyroid", "Thyroid disorder"), ("diabetes", "Diabetes"), ("anemia", "Anemia"), ("autoimmune", "Autoimmune condition"), ("none", "None of these")),
        "क्या आपको इनमें से कोई बीमारी है?",
        _options(("pcos", "पीसीओएस"), ("thyroid", "थायरॉइड"), ("diabetes", "मधुमेह"), ("anemia", "एनीमिया"), ("autoimmune", "ऑटोइम्यून रोग"), ("none", "इनमें से कोई नहीं")),
        None,
    ),
    (
        "weight_concern", QuestionType.RADIO,
        "How has your weight changed recently?",
        _options(("stable", "Stable"), ("fluctuating", "Fluctuating"), ("rapid_gain", "Rapid gain"), ("difficulty_losing", "Difficulty losing weight")),
        "हाल ही में आपका वज़न कैसे बदला है?",
        _options(("stable", "स्थिर"), ("fluctuating", "घटता-बढ़ता"), ("rapid_gain", "तेज़ी से बढ़ा"), ("difficulty_losing", "कम करने में कठिनाई")),
        None,
    ),
    (
        "digestion", QuestionType.RADIO,
        "How is your digestion?",
        _options(("good", "Good"), ("moderate", "Moderate"), ("irregular", "Irregular"), ("poor", "Poor")),
        "आपका पाचन कैसा है?",
        _options(("good", "अच्छा"), ("moderate", "ठीक-ठाक"), ("irregular", "अनियमित"), ("poor", "खराब")),
        None,
    ),
    (
        "vitamin_deficiency", QuestionType.CHECKBOX,
        "Have you been told you are low in any of these?",
        _options(("iron", "Iron"), ("vitamin_d", "Vitamin D"), ("vitamin_b12", "Vitamin B12"), ("zinc", "Zinc")),
        "क्या आपमें इनमें से किसी की कमी बताई गई है?",
        _options(("iron", "आयरन"), ("vitamin_d", "विटामिन डी"), ("vitamin_b12", "विटामिन बी12"), ("zinc", "ज़िंक")),
        None,
    ),
    (
        "stress_level", QuestionType.RADIO,
        "How would you rate your stress level?",
        _options(("low", "Low"), ("moderate", "Moderate"), ("high", "High"), ("very_high", "Very high")),
        "आप अपने तनाव के स्तर को कैसे आंकेंगे?",
        _options(("low", "कम"), ("moderate", "मध्यम"), ("high", "ज़्यादा"), ("very_high", "बहुत ज़्यादा")),
        None,
    ),
    (
        "sleep_quality", QuestionType.RADIO,
        "How well do you sleep?",
        _options(("good", "Well"), ("moderate", "Moderately"), ("poor", "Poorly"), ("insomnia", "I have insomnia")),
        "आपको नींद कैसी आती है?",
        _options(("good", "अच्छी"), ("moderate", "ठीक-ठाक"), ("poor", "खराब"), ("insomnia", "अनिद्रा है")),
        None,
    ),
    (
        "work_life_balance", QuestionType.RADIO,
        "How is your work-life balance?",
        _options(("good", "Good"), ("okay", "Okay"), ("poor", "Poor"), ("none", "There is none")),
        "आपका काम और निजी जीवन का संतुलन कैसा है?",
        _options(("good", "अच्छा"), ("okay", "ठीक"), ("poor", "खराब"), ("none", "बिल्कुल नहीं")),
        {"skip_if": {"stress_level": ["low"]}},
    ),
    (
        "diet_quality", QuestionType.RADIO,
        "How would you describe your diet?",
        _options(("balanced", "Balanced"), ("moderate", "Moderate"), ("poor", "Poor"), ("junk_food", "Mostly junk food")),
        "आप अपने आहार का वर्णन कैसे करेंगे?",
        _options(("balanced", "संतुलित"), ("moderate", "ठीक-ठाक"), ("poor", "खराब"), ("junk_food", "ज़्यादातर जंक फूड")),
        None,
    ),
    (
        "exercise", QuestionType.RADIO,
        "How often do you exercise?",
        _options(("regular", "Regularly"), ("occasional", "Occasionally"), ("rarely", "Rarely"), ("none", "Never")),
        "आप कितनी बार व्यायाम करते हैं?",
        _options(("regular", "नियमित रूप से"), ("occasional", "कभी-कभी"), ("rarely", "बहुत कम"), ("none", "कभी नहीं")),
        None,
    ),
    (
        "hair_care_practices", QuestionType.CHECKBOX,
        "Which of these hair care practices apply to you?",
        _options(("excessive_heat", "Frequent heat styling"), ("chemical_treatments", "Chemical treatments"), ("tight_hairstyles", "Tight hairstyles"), ("none", "None of these")),
        "इनमें से कौन सी बालों की देखभाल की आदतें आप पर लागू होती हैं?",
        _options(("excessive_heat", "बार-बार हीट स्टाइलिंग"), ("chemical_treatments", "केमिकल ट्रीटमेंट"), ("tight_hairstyles", "कसे हुए हेयरस्टाइल"), ("none", "इनमें से कोई नहीं")),
        None,
    ),
    (
        "environment", QuestionType.SELECT,
        "What best describes where you live?",
        _options(("clean", "Clean air and soft water"), ("polluted", "Polluted air"), ("hard_water", "Hard water")),
        "आप जहाँ रहते हैं उसका सबसे अच्छा वर्णन क्या है?",
        _options(("clean", "साफ़ हवा और नरम पानी"), ("polluted", "प्रदूषित हवा"), ("hard_water", "कठोर पानी")),
        None,
    ),
]

# (name, specialization, seniority, languages)
COACHES = [
    ("Dr. Ananya Rao", "Trichology", SeniorityLevel.SENIOR, ["en", "hi"]),
    ("Dr. Vikram Mehta", "Endocrinology", SeniorityLevel.SENIOR, ["en"]),
    ("Priya Sharma", "Nutrition", SeniorityLevel.MID, ["en", "hi"]),
    ("Rahul Verma", "Lifestyle coaching", SeniorityLevel.MID, ["hi"]),
    ("Sneha Iyer", "Hair care", SeniorityLevel.JUNIOR, ["en"]),
    ("Arjun Nair", "Stress management", SeniorityLevel.JUNIOR, ["en", "hi"]),
]

SLOT_DAYS = 7
# UTC start hours; slots run 10:00-16:00 in Asia/Kolkata
SLOT_HOURS = range(4, 10)
SLOT_LENGTH = timedelta(hours=1)


def build_questions() -> list[QuizQuestion]:
    questions = []
    for order_index, (question_id, question_type, text, options, text_hi, options_hi, rules) in enumerate(QUESTIONS, start=1):
        translations = {"question_text": {"hi": text_hi}}
        if options_hi:
            translations["options"] = {"hi": options_hi}
        questions.append(
            QuizQuestion(
                question_id=question_id,
                question_type=question_type.value,
                question_text=text,
                options=options,
                translations=translations,
                branching_rules=rules,
                order_index=order_index,
            )
        )
    return questions


def build_coaches() -> list[Coach]:
    return [
        Coach(
            name=name,
            specialization=specialization,
            seniority_level=seniority.value,
            languages=languages,
            timezone="Asia/Kolkata",
        )
        for name, specialization, seniority, languages in COACHES
    ]


def build_slots(coach: Coach, start: datetime, days: int = SLOT_DAYS) -> list[Slot]:
    """Hourly slots for ``coach`` on each of the ``days`` days after ``start``."""
    first_day = start.astimezone(timezone.utc).date() + timedelta(days=1)
    slots = []
    for offset in range(days):
        day = first_day + timedelta(days=offset)
        for hour in SLOT_HOURS:
            start_time = datetime(day.year, day.month, day.day, hour, 30, tzinfo=timezone.utc)
            slots.append(
                Slot(
                    coach=coach,
                    start_time=start_time,
                    end_time=start_time + SLOT_LENGTH,
                    timezone=coach.timezone,
                    status=SlotStatus.AVAILABLE.value,
                )
            )
    return slots


async def load_initial_data(db: AsyncSession, now: datetime | None = None) -> bool:
    """
    Insert initial data when the database is empty.

    Returns:
        True if data was inserted, False if it was already present
    """
    coach_count = await db.scalar(select(func.count()).select_from(Coach))
    question_count = await db.scalar(select(func.count()).select_from(QuizQuestion))
    if coach_count or question_count:
        logger.info("Database already has data, skipping initial data load")
        await db.rollback()
        return False

    now = now or datetime.now(timezone.utc)
    questions = build_questions()
    coaches = build_coaches()
    slots = [slot for coach in coaches for slot in build_slots(coach, now)]

    db.add_all(questions)
    db.add_all(coaches)
    db.add_all(slots)
    await db.commit()

    logger.info(
        f"Initial data loaded: {len(coaches)} coaches, "
        f"{len(questions)} quiz questions, {len(slots)} slots"
    )
    return True
