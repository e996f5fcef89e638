"""Mock result synthesizer: fabricates an analysis from the declared sport.

Nothing here looks at the uploaded video. The sport label picks a canned
feedback table, the form score is a single random draw, and the pose data is
fixed scaffolding.
"""

import random
from typing import Dict, List, Optional

from app.analysis.models import (
    AnalysisResult,
    ComparisonData,
    FeedbackItem,
    Joint,
    Joints,
    Keyframe,
    PoseData,
)
from app.jobs.models import VideoMetadata

# "Auto-detection" always lands on golf
AUTO_DETECT = "auto-detect"
AUTO_DETECT_SPORT = "golf"

MIN_FORM_SCORE = 70
MAX_FORM_SCORE = 90

CLIP_DURATION_SECONDS = 3.2
FRAME_COUNT = 96
KEYFRAME_COUNT = 5
KEYFRAME_STRIDE = 20
KEYFRAME_INTERVAL_SECONDS = 0.8

PHASES = ["Setup", "Backswing", "Top", "Impact", "Follow-through"]

RECOMMENDATIONS = [
    "Practice hip rotation drills",
    "Work on weight transfer exercises",
    "Record weekly to track progress",
]

PRO_AVERAGE = 85
IMPROVEMENT = "+5% from last session"

SPORT_FEEDBACK: Dict[str, List[dict]] = {
    "golf": [
        {
            "icon": "⚠️",
            "title": "Hip Rotation",
            "description": "Your hip rotation is starting late in the downswing. Try initiating "
                           "the hip turn slightly before your arms start moving down.",
            "type": "improvement",
        },
        {
            "icon": "✅",
            "title": "Spine Angle",
            "description": "Excellent maintenance of spine angle throughout the swing.",
            "type": "success",
        },
        {
            "icon": "💡",
            "title": "Weight Transfer",
            "description": "Focus on shifting more weight to your front foot during impact.",
            "type": "tip",
        },
    ],
    "tennis": [
        {
            "icon": "⚠️",
            "title": "Ball Toss",
            "description": "Your toss is slightly behind your head. Try tossing more in front.",
            "type": "improvement",
        },
        {
            "icon": "✅",
            "title": "Follow Through",
            "description": "Great extension and follow through after contact.",
            "type": "success",
        },
    ],
}

DEFAULT_FEEDBACK: List[dict] = [
    {
        "icon": "💡",
        "title": "Form Analysis",
        "description": "Movement pattern detected and analyzed successfully.",
        "type": "info",
    },
]


def resolve_sport(sport: str) -> str:
    return AUTO_DETECT_SPORT if sport == AUTO_DETECT else sport


def feedback_for(sport: str) -> List[FeedbackItem]:
    """Exact, case-sensitive lookup; anything unknown gets the default entry."""
    table = SPORT_FEEDBACK.get(resolve_sport(sport), DEFAULT_FEEDBACK)
    return [FeedbackItem(**item) for item in table]


def generate_keyframes() -> List[Keyframe]:
    keyframes = []
    for i in range(KEYFRAME_COUNT):
        keyframes.append(Keyframe(
            frame=i * KEYFRAME_STRIDE,
            timestamp=round(i * KEYFRAME_INTERVAL_SECONDS, 2),
            joints=Joints(
                head=Joint(x=0.5, y=round(0.2 + i * 0.01, 2), confidence=0.98),
                left_shoulder=Joint(x=0.4, y=0.35, confidence=0.95),
                right_shoulder=Joint(x=0.6, y=0.35, confidence=0.95),
                left_hip=Joint(x=0.45, y=0.6, confidence=0.92),
                right_hip=Joint(x=0.55, y=0.6, confidence=0.92),
            ),
        ))
    return keyframes


def synthesize_analysis(
    metadata: VideoMetadata,
    rng: Optional[random.Random] = None,
) -> AnalysisResult:
    """Build the fabricated analysis for an uploaded video.

    Only the form score and analysis date vary between calls. Pass a seeded
    ``random.Random`` to make the score reproducible.
    """
    rng = rng or random.Random()
    sport = resolve_sport(metadata.sport)
    form_score = rng.randint(MIN_FORM_SCORE, MAX_FORM_SCORE)

    return AnalysisResult(
        video_id=metadata.video_id,
        sport_type=sport[:1].upper() + sport[1:],
        form_score=form_score,
        duration=CLIP_DURATION_SECONDS,
        feedback=feedback_for(sport),
        pose_data=PoseData(
            frame_count=FRAME_COUNT,
            keypoints=generate_keyframes(),
            phases=list(PHASES),
        ),
        recommendations=list(RECOMMENDATIONS),
        comparison_data=ComparisonData(
            pro_average=PRO_AVERAGE,
            user_score=form_score,
            improvement=IMPROVEMENT,
        ),
    )
