"""
Built-in therapeutic content.

Used when no content directory is configured, and as the last line of
defence when authored JSON is missing or unreadable. Layout mirrors the
JSON files so either source feeds the ContentStore the same way.
"""

from __future__ import annotations

from typing import Dict, List

TOPICS: Dict[str, Dict[str, str]] = {
    "Money": {
        "description": "Financial concerns, scarcity, and abundance mindset",
        "icon": "\U0001F4B0",
    },
    "Romance": {
        "description": "Relationships, dating, and emotional connections",
        "icon": "\U0001F495",
    },
    "Self-Image": {
        "description": "Self-worth, confidence, and personal identity",
        "icon": "\U0001FA9E",
    },
}

EMOTION_PALETTES: Dict[str, List[str]] = {
    "Money": ["anxious", "resentful", "overwhelmed", "insecure", "ashamed", "fearful"],
    "Romance": ["lonely", "rejected", "unworthy", "desperate", "heartbroken", "jealous"],
    "Self-Image": ["inadequate", "worthless", "embarrassed", "disappointed", "self-critical", "defeated"],
}

# Short palettes for topics that have no authored palette
FALLBACK_EMOTIONS: Dict[str, List[str]] = {
    "Money": ["anxious", "overwhelmed", "frustrated"],
    "Romance": ["lonely", "rejected", "sad"],
    "Self-Image": ["inadequate", "worthless", "disappointed"],
}
DEFAULT_EMOTIONS: List[str] = ["anxious", "overwhelmed", "frustrated"]

# =============================================================================
# CALMING (ACT DEFUSION) EXERCISES
# =============================================================================

LEAVES_ON_A_STREAM = {
    "title": "Thoughts as Leaves on a Stream",
    "instructions": "A gentle exercise for creating space between you and any difficult thoughts.",
    "steps": [
        "Imagine yourself sitting beside a gently flowing stream on a peaceful day.",
        "Notice leaves floating down the stream, some moving quickly, others slowly, each unique.",
        "As thoughts arise in your mind, place each one on a leaf and watch it float downstream.",
        "You might see leaves labeled with worries, judgments, fears, or painful memories.",
        "Don't try to stop the leaves or push them away. Simply observe them floating by.",
        "If you find yourself getting caught up in a thought, gently return to your position by the stream.",
        "Remember: you are not the leaves or the thoughts they carry. You are the peaceful observer by the water.",
    ],
    "closing": "Thoughts come and go like leaves on a stream. You are the constant, aware presence watching from the shore.",
}

ACT_DEFUSION_EXERCISES: Dict[str, Dict] = {
    "generic": LEAVES_ON_A_STREAM,
    "Money": {
        "title": "Naming the Money Story",
        "instructions": "Step back from money worries by noticing them as a story your mind is telling.",
        "steps": [
            "Notice the loudest money thought in your mind right now.",
            "Silently add the words 'I'm having the thought that...' in front of it.",
            "Now try 'I notice I'm having the thought that...'.",
            "Give the whole pattern a title, like 'the not-enough story'.",
            "When it shows up again, greet it by name: 'Ah, the not-enough story.'",
        ],
        "closing": "The story may keep playing. You don't have to follow every word of it.",
    },
    "Romance": {
        "title": "Holding the Heart Lightly",
        "instructions": "Make room for painful relationship thoughts without letting them steer.",
        "steps": [
            "Place a hand over your heart and take three slow breaths.",
            "Let one painful thought about love or connection come to mind.",
            "Picture writing it on a card, then holding the card at arm's length.",
            "Notice that you can see the card without becoming the card.",
            "Set the card down beside you. It can stay there while you breathe.",
        ],
        "closing": "You can carry a hurt gently, without gripping it.",
    },
    "Self-Image": {
        "title": "The Inner Critic on the Radio",
        "instructions": "Turn the volume down on self-judgment by hearing it as background noise.",
        "steps": [
            "Notice one harsh thing your mind says about you.",
            "Imagine it coming out of an old radio across the room.",
            "Hear it in a silly voice, slowly, like a cartoon announcer.",
            "Notice the words lose some of their grip when you hear them this way.",
            "Let the radio keep playing quietly while you return to your breath.",
        ],
        "closing": "The critic is a voice, not a verdict.",
    },
}

# =============================================================================
# CBT / SOCRATIC SEQUENCES  (sequences[topic][emotion] -> ordered steps)
# =============================================================================

SEQUENCES: Dict[str, Dict[str, List[Dict[str, str]]]] = {
    "Money": {
        "anxious": [
            {
                "type": "cbt_reframe",
                "content": "Notice that your financial anxiety often focuses on worst-case scenarios. Consider the evidence that contradicts these fears.",
                "alternative": "Your anxiety about money shows you care about security. You can take one small step today to feel more financially grounded.",
            },
            {
                "type": "socratic",
                "content": "What is the most likely outcome, not the worst one, if this money worry plays out?",
                "alternative": "If a friend told you this exact worry, what would you ask them first?",
            },
            {
                "type": "cbt_reframe",
                "content": "Uncertainty about money is not the same as failure. You have handled uncertain months before.",
                "alternative": "One unknown number does not define your whole financial future.",
            },
        ],
        "overwhelmed": [
            {
                "type": "cbt_reframe",
                "content": "When everything feels urgent, the mind treats every bill as an emergency. Pick one item that actually needs attention this week.",
                "alternative": "You don't need to solve your finances today. You only need the next small step.",
            },
            {
                "type": "socratic",
                "content": "Which of these money tasks would still matter a month from now?",
                "alternative": "If you could only handle one thing today, which would bring the most relief?",
            },
            {
                "type": "cbt_reframe",
                "content": "Feeling overwhelmed is a sign of load, not of incompetence.",
                "alternative": "Anyone carrying this much would feel stretched. That's human, not a flaw.",
            },
        ],
        "resentful": [
            {
                "type": "socratic",
                "content": "What expectation about fairness is underneath this resentment?",
                "alternative": "What would feel like a fair outcome to you, in concrete terms?",
            },
            {
                "type": "cbt_reframe",
                "content": "Resentment points to something you value. You can honour that value without letting bitterness run the show.",
                "alternative": "Your frustration makes sense. The question is what you want to do with it next.",
            },
        ],
        "ashamed": [
            {
                "type": "cbt_reframe",
                "content": "Money mistakes are events, not identities. You are more than your balance.",
                "alternative": "Shame says 'I am bad'. The truth is closer to 'something went badly'.",
            },
            {
                "type": "socratic",
                "content": "Would you judge someone you love this harshly for the same situation?",
                "alternative": "What would compassion sound like here, in one sentence?",
            },
            {
                "type": "cbt_reframe",
                "content": "Talking about money is hard for almost everyone. Silence feeds shame more than facts do.",
                "alternative": "You are not the only one who has struggled with this. Not by a long way.",
            },
        ],
    },
    "Romance": {
        "lonely": [
            {
                "type": "cbt_reframe",
                "content": "Loneliness is a signal that you value connection, not evidence that you're unlovable.",
                "alternative": "The capacity to feel lonely shows your heart is open to love, which is a beautiful quality.",
            },
            {
                "type": "socratic",
                "content": "When did you last feel even a small moment of connection? What made it possible?",
                "alternative": "Who is one person you could reach out to, even briefly, this week?",
            },
            {
                "type": "cbt_reframe",
                "content": "Being alone right now is a circumstance, not a prediction.",
                "alternative": "This season of your life is not the whole story.",
            },
        ],
        "rejected": [
            {
                "type": "cbt_reframe",
                "content": "Rejection tells you about fit, not about worth. One person's 'no' is not a ruling on you.",
                "alternative": "Being turned down hurts because you took a risk. That took courage.",
            },
            {
                "type": "socratic",
                "content": "What story are you telling yourself about why this happened? What else could explain it?",
                "alternative": "Is there any evidence that contradicts the harshest version of this story?",
            },
        ],
        "heartbroken": [
            {
                "type": "cbt_reframe",
                "content": "Heartbreak is the cost of having loved. The depth of the pain reflects the depth of your care.",
                "alternative": "Grief after love is not weakness. It is love with nowhere to go for now.",
            },
            {
                "type": "socratic",
                "content": "What do you need most from yourself today: rest, company, or distraction?",
                "alternative": "What is one kind thing you could do for yourself in the next hour?",
            },
            {
                "type": "cbt_reframe",
                "content": "Pain this sharp does ease with time, even when it doesn't feel like it will.",
                "alternative": "You have survived every hard day so far. This one counts too.",
            },
        ],
        "jealous": [
            {
                "type": "socratic",
                "content": "What are you afraid of losing, underneath the jealousy?",
                "alternative": "If the jealousy could speak plainly, what would it ask for?",
            },
            {
                "type": "cbt_reframe",
                "content": "Jealousy is a feeling, not a fact about what is happening.",
                "alternative": "You can notice the feeling without acting on its first suggestion.",
            },
        ],
    },
    "Self-Image": {
        "inadequate": [
            {
                "type": "cbt_reframe",
                "content": "Feeling inadequate often means you're comparing your inside experience to others' outside appearance.",
                "alternative": "Inadequacy is a feeling, not a fact. Your worth doesn't depend on measuring up to impossible standards.",
            },
            {
                "type": "socratic",
                "content": "Whose standard are you measuring yourself against right now?",
                "alternative": "Would you hold a close friend to the same standard?",
            },
            {
                "type": "cbt_reframe",
                "content": "Growth and 'not enough yet' can coexist. Neither cancels your worth.",
                "alternative": "Being a work in progress is the normal human condition.",
            },
        ],
        "worthless": [
            {
                "type": "cbt_reframe",
                "content": "Worthlessness is a feeling that shows up in pain. It is not an accurate measurement of you.",
                "alternative": "Your worth was never something you had to earn.",
            },
            {
                "type": "socratic",
                "content": "What would someone who cares about you say if they heard you describe yourself this way?",
                "alternative": "Can you name one small thing you did this week that helped someone, including yourself?",
            },
            {
                "type": "cbt_reframe",
                "content": "Thoughts like this get loud when you're exhausted or hurting. Volume is not truth.",
                "alternative": "A hard moment is talking. It is not the final word on who you are.",
            },
        ],
        "embarrassed": [
            {
                "type": "socratic",
                "content": "How much will this moment matter to the people who saw it a week from now?",
                "alternative": "Have you ever seen someone else have a moment like this? How did you judge them?",
            },
            {
                "type": "cbt_reframe",
                "content": "Embarrassment fades fastest when you treat it as ordinary, because it is.",
                "alternative": "Everyone has a collection of awkward moments. This one just joined yours.",
            },
        ],
        "self-critical": [
            {
                "type": "cbt_reframe",
                "content": "Your inner critic is trying to protect you, but it uses the wrong tools.",
                "alternative": "You can hold high standards and still speak to yourself kindly.",
            },
            {
                "type": "socratic",
                "content": "Has harsh self-talk ever actually helped you do better? What helped instead?",
                "alternative": "What would encouragement sound like in place of criticism here?",
            },
        ],
    },
}

# Optional routing hints for select_subtopic(): topic -> subtopic -> triggers
SUBTOPIC_TRIGGERS: Dict[str, Dict[str, Dict[str, List[str]]]] = {
    "Money": {
        "anxious": {"keywords": ["bills", "rent", "debt", "savings", "future"], "emotions": ["fearful", "insecure"]},
        "overwhelmed": {"keywords": ["everything", "too much", "deadline", "taxes"], "emotions": []},
        "ashamed": {"keywords": ["mistake", "spent", "owe", "hide"], "emotions": []},
    },
    "Romance": {
        "lonely": {"keywords": ["alone", "single", "nobody", "isolated"], "emotions": ["unworthy"]},
        "rejected": {"keywords": ["ghosted", "dumped", "turned down", "ignored"], "emotions": ["desperate"]},
        "heartbroken": {"keywords": ["breakup", "ex", "divorce", "ended"], "emotions": []},
    },
    "Self-Image": {
        "inadequate": {"keywords": ["compare", "behind", "not good enough"], "emotions": ["disappointed", "defeated"]},
        "self-critical": {"keywords": ["stupid", "failure", "hate myself"], "emotions": []},
    },
}

# =============================================================================
# THOUGHT BUFFET  (normalised label -> reframing statements)
# =============================================================================

THOUGHT_BUFFET: Dict[str, List[str]] = {
    "generic_fallback": [
        "It's okay if your thoughts feel tangled right now.",
        "I don't need to have it all figured out.",
        "My feelings are valid, even if they're hard to put into words.",
        "This moment of difficulty is temporary and will pass.",
        "I am worthy of compassion, especially from myself.",
        "Taking time to reflect on my thoughts shows strength and self-awareness.",
    ],
    "feeling_of_worthlessness": [
        "My inherent worth is not defined by my thoughts, feelings, or achievements.",
        "This is just a feeling; it is not the truth of who I am.",
        "I will treat myself with the same kindness I would offer a friend feeling this way.",
    ],
    "anxiety_about_the_future": [
        "I cannot control the future, but I can influence how I respond to uncertainty.",
        "My anxiety shows that I care about outcomes, which reflects my values.",
        "I will focus on what I can control in this present moment.",
    ],
    "lack_of_motivation": [
        "Motivation often follows action, not the other way round.",
        "A low-energy day is information, not a character flaw.",
        "I can start with something so small it feels almost too easy.",
    ],
    "conflict_between_desire_and_action": [
        "The gap between what I want and what I do is where learning happens.",
        "I can make room for both the wanting and the hesitating.",
        "One aligned action today counts, even if it's tiny.",
    ],
    "self-criticism": [
        "I can notice my inner critic without agreeing with it.",
        "Speaking to myself kindly is not the same as letting myself off the hook.",
        "Mistakes are how everyone learns, including me.",
    ],
    "fear_of_failure": [
        "Failing at something is not the same as being a failure.",
        "Every attempt teaches me something that not trying never could.",
        "I can be afraid and still take the next step.",
    ],
    "financial_scarcity_mindset": [
        "My current finances are a situation, not a permanent identity.",
        "I can make one grounded money decision today without solving everything.",
        "Worrying about money shows I care about security, and I can act on that care calmly.",
    ],
    "loneliness_in_relationships": [
        "Feeling lonely is a sign that I value connection.",
        "I can reach toward one person, even in a small way.",
        "Being alone right now does not mean I will always be alone.",
    ],
    "imposter_syndrome": [
        "Feeling like a fraud often means I'm growing into something new.",
        "I was chosen for reasons that are real, even when I can't see them.",
        "Competent people doubt themselves too.",
    ],
    "procrastination_due_to_feeling_overwhelmed": [
        "I don't have to do it all; I only have to do the next small piece.",
        "Putting things off is a way of coping with overwhelm, not laziness.",
        "Five minutes of starting is enough for now.",
    ],
    "perfectionism_paralysis": [
        "Done and imperfect moves me further than perfect and unstarted.",
        "My worth is not measured by flawless results.",
        "I can aim for good enough and adjust as I go.",
    ],
    "social_comparison_anxiety": [
        "I am comparing my inside to someone else's outside.",
        "Other people's progress does not take anything away from mine.",
        "My path has its own timing.",
    ],
    "rejection_sensitivity": [
        "A 'no' is often about fit, timing, or circumstance, not about my worth.",
        "I can feel the sting of rejection without deciding what it means about me.",
        "The people who matter will value me as I am.",
    ],
    "abandonment_fears": [
        "My fear of being left shows how much connection matters to me.",
        "I can be a steady presence for myself while I wait to feel safe.",
        "Past losses do not have to predict future ones.",
    ],
    "career_dissatisfaction": [
        "Wanting more from my work is a sign of growth, not ingratitude.",
        "I can take one small step toward what I'd like my work to feel like.",
        "My job is part of my life, not the measure of it.",
    ],
    "body_image_concerns": [
        "My body is the place I live, not a project I must finish.",
        "I can appreciate one thing my body does for me today.",
        "Thoughts about my appearance are not facts about my value.",
    ],
    "relationship_conflict_avoidance": [
        "Disagreement can be a form of care when it's done gently.",
        "I can express one honest need without starting a battle.",
        "Keeping the peace at my own expense is not real peace.",
    ],
    "decision-making_paralysis": [
        "Most decisions can be adjusted later; few are truly permanent.",
        "Choosing something gives me information that waiting never will.",
        "A good-enough decision now beats a perfect one never.",
    ],
    "chronic_self-doubt": [
        "Doubt is a feeling that visits; it doesn't have to move in.",
        "I have handled hard things before, even when I doubted myself.",
        "I can act with confidence I'm still building.",
    ],
    "emotional_numbness": [
        "Feeling numb can be the mind's way of protecting me when things are too much.",
        "I can notice small sensations, like my breath or my feet on the ground.",
        "Feelings tend to return gently when I make space for them.",
    ],
}
