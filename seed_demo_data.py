#!/usr/bin/env python3
"""
Script to insert demo providers, their services and a demo client.

Safe to run repeatedly: profiles whose user_id already exists are skipped.
Ratings start at 0 and are only ever derived from reviews.
"""

from beauty_directory import models  # noqa: F401
from beauty_directory.database import Base, SessionLocal, engine
from beauty_directory.models import Profile, Service

DEMO_PROFILES = [
    {
        "user_id": "user_provider_1",
        "username": "sarah_beauty",
        "role": "provider",
        "bio": "Certified lash technician with 5 years experience. I work from my cozy home studio in Bondi.",
        "instagram": "sarah_lashes",
        "location": "Bondi Beach, Sydney",
        "location_type": "studio",
        "latitude": -33.8915,
        "longitude": 151.2767,
        "services": [
            {"name": "Classic Lashes", "price": "80", "duration": 90, "description": "Natural looking lash extensions"},
            {"name": "Volume Lashes", "price": "120", "duration": 120, "description": "Full and fluffy look"},
        ],
    },
    {
        "user_id": "user_provider_2",
        "username": "glam_mobile",
        "role": "provider",
        "bio": "Mobile makeup artist for weddings and events across Sydney. I come to you!",
        "instagram": "glam_mobile_mua",
        "location": "Greater Sydney Area",
        "location_type": "mobile",
        "latitude": -33.8688,
        "longitude": 151.2093,
        "services": [
            {"name": "Bridal Makeup", "price": "150", "duration": 60, "description": "Full bridal glam"},
            {"name": "Event Makeup", "price": "100", "duration": 45, "description": "Party/Event makeup"},
        ],
    },
    {
        "user_id": "user_client_1",
        "username": "jessica_c",
        "role": "client",
        "bio": "Love beauty!",
        "location": "Surry Hills",
        "latitude": -33.8861,
        "longitude": 151.2111,
        "services": [],
    },
]


def seed_demo_data():
    Base.metadata.create_all(bind=engine, checkfirst=True)
    db = SessionLocal()

    try:
        print("🌱 Seeding demo profiles...\n")
        created = 0

        for data in DEMO_PROFILES:
            data = dict(data)
            services = data.pop("services")

            if db.query(Profile).filter(Profile.user_id == data["user_id"]).first():
                print(f"   ⏭️  {data['username']} already exists, skipping")
                continue

            profile = Profile(**data)
            db.add(profile)
            db.flush()

            for service in services:
                db.add(Service(provider_id=profile.id, **service))

            db.commit()
            created += 1
            print(f"   ✅ Created {profile.username} ({profile.role}) with {len(services)} service(s)")

        print(f"\n✅ Seeding complete! {created} profile(s) created")

    except Exception as e:
        print(f"❌ Error: {e}")
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    seed_demo_data()
