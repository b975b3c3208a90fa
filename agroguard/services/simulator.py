import asyncio
import logging
import random
import time
from typing import Callable, Awaitable, Optional

from agroguard.exceptions import AnalysisInputError
from agroguard.schemas.analysis import AnalysisResult

logger = logging.getLogger(__name__)


DISEASE_TEMPLATES = (
    {
        "diseaseName": "Late Blight",
        "diseaseNameAmharic": "ዘግይቶ ብሊት",
        "diseaseNameOromifa": "Dhukkuba Boqqolloo",
        "description": "A serious fungal disease that affects potato and tomato plants, causing dark lesions on leaves and stems.",
        "symptoms": [
            "Dark brown or black lesions on leaves",
            "White fuzzy growth on underside of leaves",
            "Stems may become infected and break",
            "Tubers develop brown rot",
        ],
        "treatment": [
            "Remove and destroy infected plant parts immediately",
            "Apply copper-based fungicide spray",
            "Improve air circulation around plants",
            "Avoid overhead watering",
        ],
        "prevention": [
            "Plant resistant varieties when available",
            "Ensure good drainage and air circulation",
            "Avoid watering leaves directly",
            "Remove plant debris at end of season",
        ],
        "affectedCrops": ["Potato", "Tomato"],
        "severity": "high",
    },
    {
        "diseaseName": "Powdery Mildew",
        "diseaseNameAmharic": "ዱቄታማ ሻጋታ",
        "diseaseNameOromifa": "Dhukkuba Daakuu",
        "description": "A common fungal disease that appears as white powdery spots on leaves and stems.",
        "symptoms": [
            "White powdery spots on leaves",
            "Yellowing of affected leaves",
            "Stunted plant growth",
            "Distorted leaf shape",
        ],
        "treatment": [
            "Apply baking soda solution (1 tsp per quart water)",
            "Use neem oil spray",
            "Remove affected leaves",
            "Improve air circulation",
        ],
        "prevention": [
            "Plant in sunny locations with good air flow",
            "Avoid overhead watering",
            "Space plants properly",
            "Choose resistant varieties",
        ],
        "affectedCrops": ["Cucumber", "Squash", "Tomato", "Bean"],
        "severity": "medium",
    },
    {
        "diseaseName": "Bacterial Wilt",
        "diseaseNameAmharic": "የባክቴሪያ ዊልት",
        "diseaseNameOromifa": "Dhukkuba Baakteeriyaa",
        "description": "A bacterial disease that causes plants to wilt and die, often affecting the vascular system.",
        "symptoms": [
            "Sudden wilting of leaves",
            "Brown streaks in stem when cut",
            "Yellowing of lower leaves first",
            "Plant death within days",
        ],
        "treatment": [
            "Remove and destroy infected plants immediately",
            "Disinfect tools between plants",
            "Apply copper-based bactericide",
            "Improve soil drainage",
        ],
        "prevention": [
            "Use certified disease-free seeds",
            "Rotate crops annually",
            "Avoid working with wet plants",
            "Control insect vectors",
        ],
        "affectedCrops": ["Tomato", "Pepper", "Eggplant", "Potato"],
        "severity": "high",
    },
    {
        "diseaseName": "Leaf Spot",
        "diseaseNameAmharic": "የቅጠል ነጠብጣ",
        "diseaseNameOromifa": "Tuqaa Baalaa",
        "description": "A fungal disease causing circular spots on leaves, common in humid conditions.",
        "symptoms": [
            "Small circular spots on leaves",
            "Spots may have yellow halos",
            "Leaves may turn yellow and drop",
            "Reduced plant vigor",
        ],
        "treatment": [
            "Remove affected leaves",
            "Apply fungicide spray",
            "Improve air circulation",
            "Reduce leaf wetness",
        ],
        "prevention": [
            "Water at soil level, not on leaves",
            "Space plants for good air flow",
            "Remove plant debris",
            "Use drip irrigation",
        ],
        "affectedCrops": ["Bean", "Cucumber", "Tomato", "Pepper"],
        "severity": "low",
    },
    {
        "diseaseName": "Root Rot",
        "diseaseNameAmharic": "የሥር ብስባሽ",
        "diseaseNameOromifa": "Tortoruu Hidda",
        "description": "A soil-borne disease that affects plant roots, causing poor growth and wilting.",
        "symptoms": [
            "Stunted plant growth",
            "Yellowing leaves",
            "Wilting despite moist soil",
            "Dark, mushy roots",
        ],
        "treatment": [
            "Improve soil drainage immediately",
            "Reduce watering frequency",
            "Apply fungicide to soil",
            "Remove severely affected plants",
        ],
        "prevention": [
            "Ensure proper soil drainage",
            "Avoid overwatering",
            "Use raised beds if needed",
            "Rotate crops regularly",
        ],
        "affectedCrops": ["Most vegetables", "Beans", "Peas", "Cucumber"],
        "severity": "medium",
    },
)

HEALTHY_TEMPLATES = (
    {
        "diseaseName": "Healthy Plant",
        "diseaseNameAmharic": "ጤናማ ተክል",
        "diseaseNameOromifa": "Biqiltuu Fayyaa",
        "description": "The plant appears to be healthy with no visible signs of disease. Continue with regular care and monitoring.",
        "treatment": [
            "Continue regular watering and fertilizing",
            "Monitor for any changes",
            "Maintain good garden hygiene",
        ],
        "prevention": [
            "Keep up current care routine",
            "Regular inspection for early detection",
            "Maintain proper spacing and air circulation",
        ],
    },
    {
        "diseaseName": "Vigorous Growth",
        "diseaseNameAmharic": "ጠንካራ እድገት",
        "diseaseNameOromifa": "Guddina Cimaa",
        "description": "Excellent plant health with strong growth patterns. This plant shows optimal growing conditions.",
        "treatment": [
            "Maintain current care routine",
            "Consider light pruning for better shape",
            "Continue monitoring",
        ],
        "prevention": [
            "Keep soil moisture consistent",
            "Maintain current fertilization schedule",
            "Watch for overcrowding",
        ],
    },
)


def _now_ms() -> int:
    return int(time.time() * 1000)


def _latency() -> float:
    return random.uniform(1.0, 3.0)


class SimulatorProvider:
    """
    Offline stand-in for the remote vision model.

    The verdict is a pure function of the payload length and the clock, so it
    needs no network and can be pinned in tests by injecting ``clock_ms``.
    A 1-3 second pause emulates remote latency.
    """

    name = "simulator"
    MIN_BYTES = 100
    MAX_BYTES = 10 * 1024 * 1024

    def __init__(
        self,
        *,
        clock_ms: Callable[[], int] = _now_ms,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        jitter: Callable[[], float] = _latency,
    ):
        self.clock_ms = clock_ms
        self.sleep = sleep
        self.jitter = jitter

    def validate(self, image_bytes: bytes):
        if image_bytes is None or len(image_bytes) < self.MIN_BYTES:
            raise AnalysisInputError("Image too small or corrupted. Please upload a clear image of the plant.")
        if len(image_bytes) > self.MAX_BYTES:
            raise AnalysisInputError("Image too large. Please use an image under 10MB.")

    @staticmethod
    def seed_for(size: int, timestamp_ms: int) -> int:
        return size % 1000 + timestamp_ms % 10000

    def pick(self, size: int, timestamp_ms: int) -> AnalysisResult:
        seed = self.seed_for(size, timestamp_ms)

        if seed % 10 < 3:
            template = HEALTHY_TEMPLATES[seed % len(HEALTHY_TEMPLATES)]
            return AnalysisResult.model_validate({
                **template,
                "detected": False,
                "isHealthy": True,
                "confidence": 85 + seed % 15,
            })

        template = DISEASE_TEMPLATES[seed % len(DISEASE_TEMPLATES)]
        return AnalysisResult.model_validate({
            **template,
            "detected": True,
            "isHealthy": False,
            "confidence": 70 + seed % 25,
        })

    async def analyze(self, image_bytes: bytes) -> AnalysisResult:
        self.validate(image_bytes)
        await self.sleep(self.jitter())

        result = self.pick(len(image_bytes), self.clock_ms())
        logger.info(f"🤖 Simulated verdict: {result.disease_name} ({result.confidence:.0f}%)")
        return result

    # --- Template lookups ---

    @staticmethod
    def search_by_crop(crop_type: str) -> list[AnalysisResult]:
        needle = crop_type.lower()
        return [
            AnalysisResult.model_validate({**template, "detected": True})
            for template in DISEASE_TEMPLATES
            if any(needle in crop.lower() for crop in template["affectedCrops"])
        ]

    @staticmethod
    def get_by_name(name: str) -> Optional[AnalysisResult]:
        for template in DISEASE_TEMPLATES:
            if template["diseaseName"].lower() == name.lower():
                return AnalysisResult.model_validate({**template, "detected": True})
        return None
