from typing import Dict

from .models import MBTIType, PersonalityInfo, Dimension, Trait

PERSONALITY_INFO: Dict[MBTIType, PersonalityInfo] = {
    info.type: info for info in [
        PersonalityInfo(type=MBTIType.INTJ, name="Architect", nickname="The Mastermind",
                        description="Imaginative and strategic thinkers with a plan for everything."),
        PersonalityInfo(type=MBTIType.INTP, name="Logician", nickname="The Thinker",
                        description="Innovative inventors with an unquenchable thirst for knowledge."),
        PersonalityInfo(type=MBTIType.ENTJ, name="Commander", nickname="The Executive",
                        description="Bold, imaginative and strong-willed leaders who find or make a way."),
        PersonalityInfo(type=MBTIType.ENTP, name="Debater", nickname="The Visionary",
                        description="Smart and curious thinkers who cannot resist an intellectual challenge."),
        PersonalityInfo(type=MBTIType.INFJ, name="Advocate", nickname="The Counselor",
                        description="Quiet and mystical, yet inspiring and tireless idealists."),
        PersonalityInfo(type=MBTIType.INFP, name="Mediator", nickname="The Healer",
                        description="Poetic, kind and altruistic people, always eager to help a good cause."),
        PersonalityInfo(type=MBTIType.ENFJ, name="Protagonist", nickname="The Teacher",
                        description="Charismatic and inspiring leaders who mesmerize their listeners."),
        PersonalityInfo(type=MBTIType.ENFP, name="Campaigner", nickname="The Champion",
                        description="Enthusiastic, creative and sociable free spirits who find reason to smile."),
        PersonalityInfo(type=MBTIType.ISTJ, name="Logistician", nickname="The Inspector",
                        description="Practical and fact-minded individuals whose reliability cannot be doubted."),
        PersonalityInfo(type=MBTIType.ISFJ, name="Defender", nickname="The Protector",
                        description="Very dedicated and warm protectors, always ready to defend loved ones."),
        PersonalityInfo(type=MBTIType.ESTJ, name="Executive", nickname="The Supervisor",
                        description="Excellent administrators, unsurpassed at managing things or people."),
        PersonalityInfo(type=MBTIType.ESFJ, name="Consul", nickname="The Provider",
                        description="Extraordinarily caring, social and popular people, always eager to help."),
        PersonalityInfo(type=MBTIType.ISTP, name="Virtuoso", nickname="The Craftsman",
                        description="Bold and practical experimenters, masters of all kinds of tools."),
        PersonalityInfo(type=MBTIType.ISFP, name="Adventurer", nickname="The Composer",
                        description="Flexible and charming artists, always ready to explore something new."),
        PersonalityInfo(type=MBTIType.ESTP, name="Entrepreneur", nickname="The Dynamo",
                        description="Smart, energetic and perceptive people who truly enjoy living on the edge."),
        PersonalityInfo(type=MBTIType.ESFP, name="Entertainer", nickname="The Performer",
                        description="Spontaneous, energetic and enthusiastic people who make life exciting."),
    ]
}

TRAIT_NAMES: Dict[Trait, str] = {
    Trait.E: "Extraversion",
    Trait.I: "Introversion",
    Trait.S: "Sensing",
    Trait.N: "Intuition",
    Trait.T: "Thinking",
    Trait.F: "Feeling",
    Trait.J: "Judging",
    Trait.P: "Perceiving",
}

# Adjective forms used on the trait breakdown
TRAIT_LABELS: Dict[Trait, str] = {
    Trait.E: "Extraverted",
    Trait.I: "Introverted",
    Trait.S: "Sensing",
    Trait.N: "Intuitive",
    Trait.T: "Thinking",
    Trait.F: "Feeling",
    Trait.J: "Judging",
    Trait.P: "Perceiving",
}

DIMENSION_DESCRIPTIONS: Dict[Dimension, str] = {
    Dimension.EI: "Where you direct your energy",
    Dimension.SN: "How you take in information",
    Dimension.TF: "How you make decisions",
    Dimension.JP: "How you approach the world",
}


def personality_info(mbti_type: str) -> PersonalityInfo:
    """Metadata for a four-letter type; raises ValueError for unknown codes"""
    return PERSONALITY_INFO[MBTIType(mbti_type.upper())]
