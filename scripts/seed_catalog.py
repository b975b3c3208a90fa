"""
Seed the catalog with sample categories, chemicals, diseases and markets.

    python scripts/seed_catalog.py          # through the failover catalog (database, then REST)
    python scripts/seed_catalog.py --local  # straight into the SQL store behind the REST service
"""
import asyncio
import sys

from SharedStore.managers import FailoverRepository
from agroguard.config import init_settings
from agroguard.database import create_record_manager
from agroguard.services.catalog import Catalog, build_failover_catalog

CATEGORIES = {
    "fungal": {
        "name": {"en": "Fungal Diseases", "om": "Dhukkuboota Bosona", "am": "የፈንገስ በሽታዎች"},
        "description": {
            "en": "Diseases caused by fungal pathogens that affect plant tissues",
            "om": "Dhukkuboota bosona sababa taasisan kanneen qaamolee biqiltuu miidhan",
            "am": "በፈንገስ አምራቾች የሚከሰቱ እና የእፅዋት ሕብረ ሰውነትን የሚጎዱ በሽታዎች",
        },
        "color": "#8B5CF6",
        "icon": "Microscope",
    },
    "bacterial": {
        "name": {"en": "Bacterial Diseases", "om": "Dhukkuboota Baakteeriyaa", "am": "የባክቴሪያ በሽታዎች"},
        "description": {
            "en": "Diseases caused by bacterial infections in plants",
            "om": "Dhukkuboota baakteeriyaan biqiltoota keessatti uumaman",
            "am": "በእፅዋት ውስጥ በባክቴሪያ ኢንፌክሽን የሚከሰቱ በሽታዎች",
        },
        "color": "#EF4444",
        "icon": "Bug",
    },
    "viral": {
        "name": {"en": "Viral Diseases", "om": "Dhukkuboota Vaayirasii", "am": "የቫይረስ በሽታዎች"},
        "description": {
            "en": "Plant diseases caused by viral infections",
            "om": "Dhukkuboota biqiltootaa vaayirasiin uumaman",
            "am": "በቫይረስ ኢንፌክሽን የሚከሰቱ የእፅዋት በሽታዎች",
        },
        "color": "#F59E0B",
        "icon": "Zap",
    },
    "nutritional": {
        "name": {"en": "Nutritional Disorders", "om": "Rakkoolee Soorataa", "am": "የአመጋገብ መዛባቶች"},
        "description": {
            "en": "Plant health issues caused by nutrient deficiencies or excesses",
            "om": "Dhimmoota fayyaa biqiltootaa hanqina ykn garmalee soorataan uumaman",
            "am": "በንጥረ ነገር እጥረት ወይም ከመጠን በላይ መኖር የሚከሰቱ የእፅዋት ጤንነት ችግሮች",
        },
        "color": "#10B981",
        "icon": "Leaf",
    },
}

CHEMICALS = {
    "ridomil": {
        "name": "Ridomil Gold MZ",
        "type": "Fungicide",
        "activeIngredient": "Metalaxyl-M + Mancozeb",
        "dosage": "2.5 kg/ha",
        "safetyInstructions": {
            "en": "Wear protective clothing. Do not spray during windy conditions. Keep away from water sources.",
            "om": "Uffata eegumsa uffadhu. Qilleensa cimaa keessatti hin faffacaasin. Madda bishaanii irraa fageeessi.",
            "am": "መከላከያ ልብስ ይልበሱ። በነፋስ ጊዜ አይርጩ። ከውሃ ምንጮች ያርቁ።",
        },
    },
    "copper": {
        "name": "Copper Oxychloride",
        "type": "Fungicide",
        "activeIngredient": "Copper Oxychloride 50% WP",
        "dosage": "3 kg/ha",
        "safetyInstructions": {
            "en": "Use protective equipment. Avoid contact with skin and eyes. Store in cool, dry place.",
            "om": "Meeshaalee eegumsa fayyadami. Gogaa fi ija waliin wal qunnamtii dhowwi. Iddoo qabbanaawaa fi gogaa keessatti kuusi.",
            "am": "መከላከያ መሳሪያዎችን ይጠቀሙ። ከቆዳ እና ከዓይን ጋር መገናኘትን ያስወግዱ። በቀዝቃዛ እና ደረቅ ቦታ ያስቀምጡ።",
        },
    },
    "dimethoate": {
        "name": "Dimethoate",
        "type": "Insecticide",
        "activeIngredient": "Dimethoate 40% EC",
        "dosage": "1.5 L/ha",
        "safetyInstructions": {
            "en": "Highly toxic. Use full protective equipment. Do not eat, drink or smoke during application.",
            "om": "Summii cimaa qaba. Meeshaalee eegumsa guutuu fayyadami. Yeroo fayyadamtu nyaachuu, dhuguu ykn tamboo hin xuuxin.",
            "am": "በጣም መርዛማ ነው። ሙሉ መከላከያ መሳሪያ ይጠቀሙ። በመርጨት ጊዜ አይብሉ፣ አይጠጡ ወይም አያጨሱ።",
        },
    },
}

# category / chemical keys are resolved to the ids created above
DISEASES = [
    {
        "name": {"en": "Late Blight", "om": "Dhukkuba Booda", "am": "የዘገየ በሽታ"},
        "cropType": "Potato",
        "category": "fungal",
        "featured": True,
        "images": ["https://example.com/late-blight.jpg"],
        "symptoms": {
            "en": ["Dark spots on leaves", "White fuzzy growth on leaf undersides", "Brown lesions on stems"],
            "om": ["Bakka gurraacha baala irratti", "Guddina adii baala jalatti", "Madaa magariisa hidda irratti"],
            "am": ["በቅጠሎች ላይ ጥቁር ነጠብጣቦች", "በቅጠል ስር ነጭ ፈንገስ", "በግንድ ላይ ቡናማ ቁስሎች"],
        },
        "treatments": [
            {"chemical": "ridomil", "dosage": "2.5 kg/ha", "applicationMethod": "Foliar spray"},
        ],
    },
    {
        "name": {"en": "Coffee Berry Disease", "om": "Dhukkuba Buna", "am": "የቡና ፍሬ በሽታ"},
        "cropType": "Coffee",
        "category": "fungal",
        "featured": True,
        "images": ["https://example.com/coffee-berry-disease.jpg"],
        "symptoms": {
            "en": ["Dark sunken spots on berries", "Premature fruit drop", "Reduced yield"],
            "om": ["Bakka gurraacha ija buna irratti", "Iji buna dafee bu'uu", "Oomisha hir'achuu"],
            "am": ["በቡና ፍሬ ላይ ጥቁር ጉድጓዶች", "ፍሬው ቀደም ብሎ መውደቅ", "ምርት መቀነስ"],
        },
        "treatments": [
            {"chemical": "copper", "dosage": "3 kg/ha", "applicationMethod": "Foliar spray"},
        ],
    },
]

MARKETS = [
    {
        "name": "Robe Agricultural Center",
        "location": "Robe Town",
        "region": "Oromia",
        "chemicals": [
            {"chemical": "ridomil", "price": 850, "available": True, "lastUpdated": "2024-01-27"},
            {"chemical": "copper", "price": 320, "available": True, "lastUpdated": "2024-01-27"},
        ],
    },
    {
        "name": "Goba Farmers Market",
        "location": "Goba Town",
        "region": "Oromia",
        "chemicals": [
            {"chemical": "copper", "price": 310, "available": True, "lastUpdated": "2024-01-27"},
            {"chemical": "dimethoate", "price": 450, "available": False, "lastUpdated": "2024-01-25"},
        ],
    },
]


def link_chemical(entry: dict, chemical_ids: dict) -> dict:
    key = entry["chemical"]
    linked = {k: v for k, v in entry.items() if k != "chemical"}
    return {**linked, "chemicalId": chemical_ids[key], "chemicalName": CHEMICALS[key]["name"]}


async def seed(catalog: Catalog):
    print("🌱 Seeding disease categories...")
    category_ids = {}
    for key, category in CATEGORIES.items():
        category_ids[key] = await catalog.categories.create(category)
        print(f"   ✅ {category['name']['en']}: {category_ids[key]}")

    print("🌱 Seeding chemicals...")
    chemical_ids = {}
    for key, chemical in CHEMICALS.items():
        chemical_ids[key] = await catalog.chemicals.create(chemical)
        print(f"   ✅ {chemical['name']}: {chemical_ids[key]}")

    print("🌱 Seeding diseases...")
    for disease in DISEASES:
        payload = {k: v for k, v in disease.items() if k != "category"}
        payload["categoryId"] = category_ids[disease["category"]]
        payload["treatments"] = [link_chemical(t, chemical_ids) for t in disease["treatments"]]
        print(f"   ✅ {disease['name']['en']}: {await catalog.diseases.create(payload)}")

    print("🌱 Seeding markets...")
    for market in MARKETS:
        payload = {**market, "chemicals": [link_chemical(c, chemical_ids) for c in market["chemicals"]]}
        print(f"   ✅ {market['name']}: {await catalog.markets.create(payload)}")


async def main():
    settings = init_settings()

    if "--local" in sys.argv:
        store = create_record_manager(settings.SQLALCHEMY_DATABASE_URI)
        await store.init_db()
        catalog = Catalog(FailoverRepository(store))
        print(f"🗄️  Seeding the local store: {settings.SQLALCHEMY_DATABASE_URI.split('@')[-1]}")
    else:
        catalog = build_failover_catalog(settings)
        print("🍃 Seeding through the failover catalog")

    try:
        await seed(catalog)
    finally:
        await catalog.close()
    print("🎉 Seeding completed")


if __name__ == "__main__":
    asyncio.run(main())
