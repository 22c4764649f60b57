"""
Default catalog data

Inserts the standard items and care items when they are missing. Safe to run
on every startup: existing rows (matched by name and type) are left alone.
"""

import logging

from sqlalchemy.orm import Session

from .models import CareItem, Item

logger = logging.getLogger(__name__)

# (name, type, period_value, period_unit)
DEFAULT_ITEMS = [
    ("심리검사", "test", 3, "months"),
    ("뇌파검사", "test", 6, "months"),
    ("4주 주사", "injection", 4, "weeks"),
    ("12주 주사", "injection", 12, "weeks"),
    ("24주 주사", "injection", 24, "weeks"),
]

# (name, type, interval_weeks, description)
DEFAULT_CARE_ITEMS = [
    ("혈액검사", "procedure", 12, "정기적인 혈액 검사를 통한 건강 상태 확인"),
    ("소변검사", "procedure", 24, "신장 기능 및 요로계 건강 상태 검사"),
    ("심전도검사", "procedure", 52, "심장 기능 및 부정맥 확인을 위한 검사"),
    ("흉부 X-ray", "procedure", 52, "폐 및 심장 건강 상태 확인을 위한 영상 검사"),
    ("혈압측정", "procedure", 4, "혈압 모니터링을 통한 심혈관 건강 관리"),
    ("체중측정", "procedure", 2, "정기적인 체중 변화 모니터링"),
    ("인슐린 주사", "medication", 1, "당뇨병 관리를 위한 주기적 인슐린 투여"),
    ("독감 백신", "medication", 52, "연간 독감 예방을 위한 백신 접종"),
    ("COVID-19 백신", "medication", 26, "코로나19 예방을 위한 추가 백신 접종"),
    ("폐렴구균 백신", "medication", 260, "폐렴 예방을 위한 백신 접종 (5년 주기)"),
    ("B형간염 백신", "medication", 520, "B형간염 예방을 위한 백신 접종 (10년 주기)"),
    ("비타민 B12 주사", "medication", 12, "비타민 B12 결핍 예방 및 치료"),
]


def seed_default_data(db: Session) -> dict:
    """Insert missing default rows. Returns how many of each were created."""
    existing_items = {(i.name, i.type) for i in db.query(Item.name, Item.type).all()}
    existing_care_items = {(c.name, c.type) for c in db.query(CareItem.name, CareItem.type).all()}

    created = {"items": 0, "care_items": 0}

    for name, item_type, period_value, period_unit in DEFAULT_ITEMS:
        if (name, item_type) not in existing_items:
            db.add(Item(name=name, type=item_type, period_value=period_value, period_unit=period_unit))
            created["items"] += 1

    for name, item_type, interval_weeks, description in DEFAULT_CARE_ITEMS:
        if (name, item_type) not in existing_care_items:
            db.add(
                CareItem(
                    name=name, type=item_type, interval_weeks=interval_weeks, description=description
                )
            )
            created["care_items"] += 1

    if created["items"] or created["care_items"]:
        db.commit()
        logger.info(
            f"Seeded {created['items']} item(s) and {created['care_items']} care item(s)"
        )

    return created
