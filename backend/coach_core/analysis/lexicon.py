"""
Keyword tables for the keyword sentiment analyzer.

Dictionary order is significant: emotion categories are reported, and mood
ties are broken, in the order they are declared here.
"""
from typing import Dict, List

from ..models.sentiment import Intensity, Mood, Sentiment, SupportLevel

POSITIVE_WORDS: List[str] = [
    'great', 'awesome', 'amazing', 'fantastic', 'wonderful', 'brilliant', 'excellent',
    'love', 'enjoy', 'excited', 'motivated', 'confident', 'proud', 'happy', 'satisfied',
    'success', 'progress', 'improvement', 'achievement', 'milestone', 'breakthrough'
]

NEGATIVE_WORDS: List[str] = [
    'bad', 'terrible', 'awful', 'horrible', 'hate', 'frustrated', 'angry', 'upset',
    'sad', 'disappointed', 'discouraged', 'stuck', 'confused', 'lost', 'overwhelmed',
    'stressed', 'anxious', 'worried', 'scared', 'afraid', 'nervous', 'panic'
]

NEUTRAL_WORDS: List[str] = [
    'okay', 'fine', 'alright', 'normal', 'regular', 'standard', 'typical', 'usual',
    'question', 'ask', 'wonder', 'curious', 'interested', 'learn', 'study'
]

EMOTION_KEYWORDS: Dict[Mood, List[str]] = {
    Mood.EXCITED: ['excited', 'awesome', 'amazing', 'fantastic', 'love', 'great', 'wonderful', 'brilliant'],
    Mood.FRUSTRATED: ['frustrated', 'stuck', 'confused', 'difficult', 'hard', 'struggling', 'problem', 'error', 'bug'],
    Mood.CONFUSED: ['confused', 'unclear', "don't understand", 'lost', 'help', 'explain', 'what', 'how'],
    Mood.MOTIVATED: ['motivated', 'ready', 'determined', 'focused', 'goal', 'achieve', 'success', 'progress'],
    Mood.OVERWHELMED: ['overwhelmed', 'too much', 'stress', 'pressure', 'anxiety', 'panic', 'drowning', 'stressed'],
    Mood.CONFIDENT: ['confident', 'sure', 'know', 'understand', 'mastered', 'expert', 'skilled', 'capable'],
    Mood.ANXIOUS: ['anxious', 'worried', 'nervous', 'scared', 'afraid', 'concerned', 'doubt', 'uncertain'],
    Mood.CURIOUS: ['curious', 'interested', 'wonder', 'explore', 'learn', 'discover', 'question', 'investigate']
}

SUPPORT_KEYWORDS: Dict[SupportLevel, List[str]] = {
    SupportLevel.LOW: ['fine', 'okay', 'good', 'alright', 'manageable'],
    SupportLevel.MEDIUM: ['help', 'guidance', 'advice', 'support', 'assistance'],
    SupportLevel.HIGH: ['urgent', 'emergency', 'critical', 'desperate', 'stuck', 'failing', 'crisis']
}

# Emotions that call for at least medium support
DISTRESS_EMOTIONS = (Mood.FRUSTRATED, Mood.OVERWHELMED, Mood.ANXIOUS, Mood.CONFUSED)

# Scanned in priority order: high, then medium, then low
INTENSITY_WORDS: Dict[Intensity, List[str]] = {
    Intensity.HIGH: ['very', 'extremely', 'incredibly', 'totally', 'completely', 'absolutely'],
    Intensity.MEDIUM: ['quite', 'pretty', 'rather', 'fairly', 'moderately'],
    Intensity.LOW: ['slightly', 'a bit', 'somewhat', 'kind of', 'maybe']
}

TRIGGER_KEYWORDS: Dict[str, List[str]] = {
    'technical_difficulty': ['error', 'bug', 'broken', 'not working', 'failed', 'crash'],
    'learning_overwhelm': ['too much', 'overwhelmed', 'confused', 'lost', 'drowning'],
    'time_pressure': ['deadline', 'urgent', 'rush', 'time', 'quickly', 'fast'],
    'perfectionism': ['perfect', 'flawless', 'mistake', 'wrong', 'correct', 'right'],
    'comparison': ['better', 'worse', 'compare', 'others', 'everyone', 'people'],
    'uncertainty': ['unsure', "don't know", 'unclear', 'confused', 'lost', 'stuck']
}

# ===========================
# Recommendation rules
# ===========================

SENTIMENT_RECOMMENDATIONS: Dict[Sentiment, List[str]] = {
    Sentiment.NEGATIVE: [
        'Take a break and come back with fresh perspective',
        'Break down the problem into smaller, manageable steps'
    ],
    Sentiment.POSITIVE: [
        'Keep up the great momentum!',
        'Consider sharing your success with others'
    ]
}

EMOTION_RECOMMENDATIONS: Dict[Mood, List[str]] = {
    Mood.FRUSTRATED: [
        'Try a different approach or ask for help',
        'Remember that every expert was once a beginner'
    ],
    Mood.OVERWHELMED: [
        'Focus on one thing at a time',
        'Create a priority list and tackle items one by one'
    ],
    Mood.CONFUSED: [
        'Ask specific questions to clarify your understanding',
        'Look for examples or tutorials to guide you'
    ],
    Mood.ANXIOUS: [
        'Practice deep breathing or mindfulness techniques',
        "Remember that it's okay to make mistakes while learning"
    ]
}

SUPPORT_RECOMMENDATIONS: Dict[SupportLevel, List[str]] = {
    SupportLevel.HIGH: [
        'Consider reaching out to a mentor or peer for immediate help',
        'Take a step back and reassess your approach'
    ],
    SupportLevel.MEDIUM: [
        "I'm here to help guide you through this",
        "Let's work through this together step by step"
    ]
}

MAX_RECOMMENDATIONS = 3

# ===========================
# Response templates
# ===========================

EMPATHETIC_RESPONSES: Dict[Sentiment, List[str]] = {
    Sentiment.POSITIVE: [
        "That's fantastic! I can feel your enthusiasm and it's contagious!",
        "I love hearing about your progress and excitement!",
        "Your positive energy is amazing - keep it up!",
        "That's wonderful! Your dedication is really paying off!"
    ],
    Sentiment.NEGATIVE: [
        "I understand this can be challenging, but you're not alone in this journey.",
        "It's completely normal to feel frustrated - every learner goes through this.",
        "I can hear that you're struggling, and I want you to know that it's okay.",
        "Let's work through this together - we'll find a way forward."
    ],
    Sentiment.NEUTRAL: [
        "I appreciate you sharing this with me. Let's explore this together.",
        "That's a great question - I'm here to help you find the answers.",
        "I can see you're thinking through this carefully - that's a great approach.",
        "Let's break this down and work through it step by step."
    ]
}

EMOTION_RESPONSES: Dict[Mood, str] = {
    Mood.FRUSTRATED: (
        "I can sense your frustration, and I want you to know that it's completely understandable. "
        "Learning new things can be challenging, but you're making progress even when it doesn't feel like it."
    ),
    Mood.OVERWHELMED: (
        "It sounds like you might be feeling overwhelmed, and that's a very common feeling when "
        "learning something new. Let's take this one step at a time."
    ),
    Mood.CONFUSED: (
        "Confusion is a natural part of the learning process. It means you're pushing yourself to "
        "understand something new, which is actually a good sign!"
    ),
    Mood.ANXIOUS: (
        "I can hear some anxiety in your message, and I want you to know that it's okay to feel "
        "uncertain. Learning is a journey, and it's normal to have these feelings."
    ),
    Mood.EXCITED: (
        "Your excitement is wonderful to see! That kind of enthusiasm is what drives great "
        "learning and achievement."
    ),
    Mood.MOTIVATED: (
        "I love seeing your motivation! That determination will take you far in your learning journey."
    )
}

MOOD_SUGGESTIONS: Dict[Mood, List[str]] = {
    Mood.FRUSTRATED: [
        'Try a different learning approach or resource',
        'Take a short break and come back with fresh eyes',
        'Ask for help from a mentor or peer'
    ],
    Mood.OVERWHELMED: [
        'Break down your learning into smaller, manageable chunks',
        'Create a priority list and focus on one thing at a time',
        'Consider reducing your learning load temporarily'
    ],
    Mood.CONFUSED: [
        'Ask specific questions to clarify your understanding',
        'Look for additional examples or explanations',
        'Try explaining the concept to someone else'
    ],
    Mood.ANXIOUS: [
        'Practice relaxation techniques like deep breathing',
        'Remember that making mistakes is part of learning',
        'Focus on progress rather than perfection'
    ],
    Mood.EXCITED: [
        'Channel this energy into focused learning sessions',
        'Share your excitement with others in the community',
        'Set ambitious but achievable goals'
    ],
    Mood.MOTIVATED: [
        'Use this motivation to tackle challenging topics',
        'Set specific, time-bound goals',
        'Track your progress to maintain momentum'
    ]
}

HIGH_INTENSITY_SUGGESTIONS: List[str] = [
    'Consider taking a step back to process your feelings',
    'Reach out to a mentor or counselor for additional support'
]

TRIGGER_SUGGESTIONS: Dict[str, str] = {
    'technical_difficulty': 'Try debugging step by step or ask for technical help',
    'learning_overwhelm': 'Focus on mastering one concept at a time',
    'time_pressure': 'Prioritize the most important tasks and let go of perfectionism'
}

MAX_SUGGESTIONS = 4
