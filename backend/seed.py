"""Seed database with demo patients. Drop-and-recreate tables on each run."""

from __future__ import annotations

import asyncio

from src.database import async_session, engine
from src.models.orm import Base, Patient
from src.services.patient_service import validate_patient_input

DEMO_PATIENTS = [
    ("Ravi Kumar", 34, "Male", "Koli", "Fever for three days"),
    ("Sunita Devi", 27, "Female", "Rampur", "Antenatal check, second trimester"),
    ("Meena Bai", 62, "Female", "Koli", "Persistent cough and breathlessness"),
    ("Arjun Singh", 8, "Male", "Baroda Khurd", "Diarrhoea, mild dehydration"),
    ("Kamla Yadav", 45, "Female", "Rampur", "Joint pain in both knees"),
    ("Sanjay Meena", 51, "Male", "Chandpur", "High blood pressure follow-up"),
]


async def main() -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    async with async_session() as session:
        for row in DEMO_PATIENTS:
            fields = validate_patient_input(*row)
            session.add(
                Patient(
                    name=fields.name,
                    age=fields.age,
                    gender=fields.gender,
                    village=fields.village,
                    health_issue=fields.health_issue,
                )
            )
            # Commit one by one so created_at follows list order.
            await session.commit()

    print(f"Seeded {len(DEMO_PATIENTS)} patients.")
    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
