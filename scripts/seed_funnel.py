"""Seed the default real-estate sales funnel stages."""

import sys
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT))

from realty_crm.database.db import SessionLocal
from realty_crm.database.models import FunnelStage

DEFAULT_STAGES = (
    ("Novo Lead", "#3b82f6", "Lead just arrived"),
    ("Contato Inicial", "#8b5cf6", "First contact made"),
    ("Qualificação", "#f59e0b", "Budget and interest confirmed"),
    ("Visita Agendada", "#10b981", "Property visit booked"),
    ("Proposta", "#ef4444", "Commercial proposal sent"),
    ("Negociação", "#ec4899", "Terms under negotiation"),
)


def seed_stages() -> None:
    db = SessionLocal()
    try:
        if db.query(FunnelStage).count():
            print("Funnel stages already seeded.")
            return

        for order, (name, color, description) in enumerate(DEFAULT_STAGES):
            db.add(FunnelStage(name=name, order=order, color=color, description=description))
        db.commit()
        print(f"Seeded {len(DEFAULT_STAGES)} funnel stages.")
    except Exception as e:
        print(f"Error seeding funnel stages: {e}")
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    seed_stages()
