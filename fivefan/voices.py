"""
Voice Tables

The five 5FAN voices and their static phrase corpora. Each voice owns an
ordered set of phrase categories and an ordered list of classifier rules.
A reply's category is never stored with the phrase: it is recovered from
the final text by the first rule whose marker appears in it.

Phrases containing ``{input}`` echo the user's words back and cannot be
used when the input is blank.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Tuple

from fivefan import persona

INPUT_PLACEHOLDER = "{input}"

Category = Tuple[str, Tuple[str, ...]]
Rule = Tuple[str, Tuple[str, ...]]


@dataclass(frozen=True)
class Voice:
    """A response persona: prompt, phrase table and classifier."""

    name: str
    title: str
    description: str
    system_prompt: str
    categories: Tuple[Category, ...]
    rules: Tuple[Rule, ...]
    default_category: str
    # Derived from categories once, at construction
    phrases: Tuple[str, ...] = field(init=False, repr=False, compare=False)
    literal_phrases: Tuple[str, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        # phrases: every phrase, flattened in category order.
        # literal_phrases: phrases from categories that never need the user's input.
        object.__setattr__(self, "phrases",
                           tuple(p for _, group in self.categories for p in group))
        object.__setattr__(self, "literal_phrases", tuple(
            p
            for _, group in self.categories
            if not any(INPUT_PLACEHOLDER in q for q in group)
            for p in group
        ))

    def categorize(self, text: str) -> str:
        """Classify final reply text. First matching rule wins; case-sensitive."""
        for tag, markers in self.rules:
            if any(marker in text for marker in markers):
                return tag
        return self.default_category


# ---------------------------------------------------------------------------
# Phrase tables
# ---------------------------------------------------------------------------

_HEAR_PHRASES = (
    ("reflective", (
        "I hear you're feeling {input}",
        "It sounds like {input} is on your mind",
        "You're experiencing {input}, and that's important",
        "I'm listening to what you're sharing about {input}",
        "Thank you for expressing {input} with me",
        "{input} - I'm here with you in this",
        "What you're saying about {input} matters",
        "I understand you're going through {input}",
        "{input} is something I want to understand better",
        "I hear the weight of {input} in your words",
        "You're telling me about {input}, and I'm present for that",
        "{input} - let's sit with that together",
        "I'm receiving what you're sharing about {input}",
        "Your feelings about {input} are valid",
        "I acknowledge what you're expressing: {input}",
    )),
    ("follow-up", (
        "Would you like to tell me more?",
        "How are you feeling about this right now?",
        "What would help you feel supported in this moment?",
        "Can you share what this means to you?",
        "What's the most important part of this for you?",
        "How long have you been carrying this?",
        "Is there something specific you need right now?",
        "What would it feel like to let some of this out?",
        "Would it help to explore this further together?",
        "What else is here for you?",
        "How does your heart feel as you share this?",
        "What do you need to hear right now?",
        "Is there more beneath the surface?",
        "What would comfort look like for you?",
        "How can I support you through this?",
    )),
    ("encouragement", (
        "You matter, and I'm here",
        "Your feelings are valid and important",
        "I see your strength in sharing this",
        "You're not alone in this moment",
        "Thank you for trusting me with your words",
        "Your voice deserves to be heard",
        "I'm honored you're sharing this with me",
        "You're brave for expressing what's in your heart",
        "I'm holding space for you",
        "Your experience is real and important",
        "I believe you and I'm here for you",
        "You deserve compassion and understanding",
        "I'm grateful you're opening up",
        "Your authenticity is beautiful",
        "I'm here to listen without judgment",
        "You're doing the best you can, and that's enough",
        "I see you, I hear you, and you matter",
        "Your story is important to me",
        "I'm walking alongside you in this",
        "You have every right to feel what you're feeling",
    )),
    ("supportive", (
        "Take all the time you need - I'm not going anywhere",
        "Whatever you're feeling, there's room for it here",
        "I'm listening with my whole heart",
        "Your words are safe with me",
        "This space is yours - use it however you need",
        "I'm present with you in this moment",
        "You don't have to carry this alone anymore",
        "I appreciate your courage in being vulnerable",
        "Let's breathe through this together",
        "Your feelings make sense, given what you're experiencing",
        "I'm here to witness your truth",
        "You're allowed to feel exactly as you do",
        "There's no pressure - just presence",
        "I'm listening deeply to what you're sharing",
        "Your wellbeing matters deeply to me",
        "I'm right here, fully attentive to you",
        "Thank you for letting me into this moment with you",
        "I'm committed to understanding your experience",
        "You're doing something important by sharing",
        "I'm here with open ears and an open heart",
    )),
)

_INSPYRE_PHRASES = (
    ("past-strength", (
        "You've overcome before; your strength is real",
        "Remember how far you've already come",
        "You've survived every difficult day until now - that's powerful",
        "Your past victories are proof of your resilience",
        "You've been strong before, and that strength lives in you still",
        "Think of the storms you've weathered - you're still here",
        "You've done hard things before, and you can do them again",
        "Your journey shows courage, even when you couldn't see it",
        "You've found your way through darkness before",
        "Every challenge you've faced has made you who you are today",
        "Your history is filled with moments of quiet bravery",
        "You've rebuilt yourself before - you know the way",
        "The strength that carried you then hasn't left you",
    )),
    ("value-affirmation", (
        "There's a spark in you, even if it's hard to see right now",
        "Your existence adds something irreplaceable to this world",
        "You have inherent worth that nothing can diminish",
        "You don't have to earn your place here - you already belong",
        "Your value isn't determined by your productivity or performance",
        "You are enough, exactly as you are in this moment",
        "There's light within you that can never be extinguished",
        "You matter in ways you may not even realize",
        "Your unique perspective is a gift to those around you",
        "The world is better with you in it",
        "You carry something beautiful that only you can offer",
        "Your worth is unconditional and unchanging",
        "You are valuable simply because you exist",
        "There's magic in who you are, waiting to be remembered",
    )),
    ("inner-light", (
        "Your light may be dim right now, but it's still burning",
        "Even the smallest ember can reignite a flame",
        "Your spirit knows the way back to brightness",
        "There's wisdom inside you that's never left",
        "Your inner compass is still there, guiding you gently",
        "The light in you recognizes the light in others",
        "Your soul remembers what your mind has forgotten",
        "There's a quiet knowing within you that remains untouched",
        "Your essence is pure, beneath all the noise",
        "You contain multitudes of possibility",
        "Your heart knows how to heal itself",
        "There's a resilient core in you that bends but never breaks",
        "Your inner child still believes in wonder",
        "Deep down, you know your own strength",
    )),
    ("resilience", (
        "You're not broken - you're breaking open to new possibilities",
        "Healing isn't linear, and you're right where you need to be",
        "Every step forward counts, no matter how small",
        "You're allowed to grow at your own pace",
        "Your wounds are proof you've lived, not proof you're damaged",
        "You're becoming who you're meant to be, one moment at a time",
        "Growth often looks like struggle before it looks like triumph",
        "You're learning and evolving, even when it doesn't feel like it",
        "Your journey is valid, messy parts and all",
        "You're planting seeds today that will bloom tomorrow",
        "Transformation begins in the darkest soil",
        "You're stronger than the thoughts that doubt you",
    )),
    ("hope", (
        "Better days are coming, and you'll be there to see them",
        "Your story isn't over - there are beautiful chapters ahead",
        "Tomorrow holds possibilities you can't yet imagine",
        "You're writing a comeback story right now",
        "The best version of you is still unfolding",
        "Your future self will thank you for not giving up",
        "There's so much waiting to meet you on the other side of this",
        "Your breakthrough is closer than you think",
        "The universe isn't done surprising you with goodness",
        "You have countless mornings ahead full of potential",
        "Your next smile, your next laugh - they're coming",
    )),
    ("present-strength", (
        "Right now, in this moment, you're doing it",
        "Just by being here, you're proving your courage",
        "The fact that you're still trying says everything",
        "You're showing up for yourself, and that matters immensely",
        "This moment won't last forever, but your spirit will",
        "You're breathing, you're here - that's enough for now",
        "Your willingness to keep going is extraordinary",
        "You're more capable than you're giving yourself credit for",
        "Today, you are enough. Tomorrow, you are enough",
        "You're doing the best you can with what you have, and that's beautiful",
    )),
    ("connection", (
        "You're part of something greater than yourself",
        "You belong to the family of souls who keep trying",
        "Your struggles connect you to everyone who's ever felt lost",
        "You're never as alone as you feel",
        "There are people who need the person you're becoming",
        "The universe conspires in your favor, even when you can't see it",
        "You're woven into the fabric of countless lives",
        "Your presence ripples out in ways you'll never fully know",
        "You're held by a web of connection, seen and unseen",
        "The world has been waiting for exactly who you are",
    )),
)

_FLOW_PHRASES = (
    ("stream-metaphor", (
        "The stream of life is always moving, even when we pause",
        "Like water around a stone, life flows around obstacles",
        "You're a river, not a pond - built for movement",
        "Every river finds its way to the ocean, and so will you",
        "The current knows where it's going, even when you don't",
        "Let yourself flow like water - adaptable and unstoppable",
        "Rivers don't rush, they simply flow. You can too",
        "The stream carries you even when you're not swimming",
        "Like a river carving through rock, gentle persistence wins",
        "You're flowing toward something beautiful, always",
    )),
    ("universal-energy", (
        "You're part of something flowing, and it carries you forward",
        "The universe breathes, and you breathe with it",
        "Positive energy moves through you like wind through trees",
        "You're connected to an infinite source of renewal",
        "Life force flows through every cell of your being",
        "You're plugged into something greater than yourself",
        "The same energy that moves galaxies moves through you",
        "You're a channel for the universe's endless creativity",
        "Divine flow runs through your veins",
        "You're wrapped in the eternal current of existence",
    )),
    ("natural-rhythm", (
        "Like seasons changing, you're always in transition",
        "The moon waxes and wanes, and so do you - both are perfect",
        "Nature doesn't hurry, yet everything is accomplished",
        "You're part of the great inhale and exhale of existence",
        "Tides come in, tides go out - trust your natural rhythm",
        "Day follows night follows day - the cycle continues through you",
        "Like clouds drifting, you're moving even in stillness",
        "The earth rotates, the planets orbit - you're in motion always",
        "Your heartbeat is the drum of the universe's song",
        "Seasons teach us that change is the only constant",
    )),
    ("release", (
        "Release your grip and let the current guide you",
        "What you let go of flows downstream, away from you",
        "Surrender to the flow and feel the ease that comes",
        "You don't have to control the river to ride it",
        "Let go, and watch how perfectly things arrange themselves",
        "The tide takes what needs to leave and brings what needs to arrive",
        "Release resistance and feel yourself glide effortlessly",
        "Like leaves on water, let your worries drift away",
        "You're safe to let go - the flow will catch you",
        "Loosening your grip is the beginning of freedom",
    )),
    ("trust", (
        "Trust that the current knows the way home",
        "You're being carried by something benevolent",
        "The flow supports you even when you can't feel it",
        "Life is conspiring for your highest good",
        "You're held by invisible hands of grace",
        "The universe has your back, always",
        "Trust the timing of your unfolding",
        "You're exactly where the flow wants you to be",
        "Everything is working out in your favor",
        "The current never takes you where you don't belong",
    )),
    ("movement", (
        "Even small ripples create lasting effects",
        "You're in motion, even when progress feels invisible",
        "Momentum builds quietly before it becomes obvious",
        "Every breath is forward movement",
        "You're making waves just by being here",
        "Movement is change, and change is always happening",
        "You're dancing with life, even in slow motion",
        "The spiral moves forward while appearing to circle",
        "Your journey continues, step by liquid step",
        "Progress flows like honey - slow and steady and sweet",
    )),
    ("water-wisdom", (
        "Be like water - soft enough to flow, strong enough to reshape mountains",
        "Fluidity is strength, not weakness",
        "Water doesn't fight obstacles, it embraces them and moves on",
        "You're liquid light, flowing through form",
        "Like morning dew, you're renewed each day",
        "Water finds a way, and so do you",
        "You're as vast as the ocean and as gentle as rain",
        "Waves return to the sea, and you return to peace",
        "Flow doesn't mean weak - the ocean is made of flow",
        "You're fluid like water, shaped by nothing, shaping everything",
    )),
    ("continuity", (
        "The flow is endless, and so is your capacity to begin again",
        "Each moment is a fresh current of possibility",
        "You're renewed with every passing second",
        "The fountain of life never runs dry",
        "Every ending is just the flow turning a corner",
        "You're part of an eternal dance",
        "The stream doesn't stop, neither does your potential",
        "Life keeps flowing new chances your way",
        "You're forever beginning, forever continuing",
        "The circle is unbroken, and you're part of it",
    )),
)

_YOU_PHRASES = (
    ("uniqueness", (
        "No one else can be you, and that's your power",
        "Your exact combination of traits has never existed before",
        "You're an original in a world of copies",
        "There's never been anyone quite like you, and there never will be again",
        "Your uniqueness isn't a flaw - it's your signature",
        "You're not meant to fit a mold that was never made for you",
        "The world needs your specific flavor of magic",
        "Your differences are what make you indispensable",
        "You're a limited edition of one",
        "Nobody else has your exact story, perspective, or heart",
    )),
    ("journey", (
        "Your journey, with all its quirks, is one of a kind",
        "Your scars tell a story only you can tell",
        "Every detour has shaped the beautiful path that is uniquely yours",
        "Your imperfections are brushstrokes in your masterpiece",
        "The crooked path you've walked is yours alone to claim",
        "Your story doesn't need to look like anyone else's",
        "All the messy parts of you create something whole and real",
        "Your journey is perfect because it's authentically yours",
        "The way you've stumbled and risen is yours to own with pride",
        "Your path is valid even when it doesn't match the map",
    )),
    ("wholeness", (
        "You're not broken - you're beautifully complete as you are",
        "Your imperfections don't subtract from you; they complete you",
        "You're whole, not despite your flaws, but because of them",
        "The cracks in you are where your light shines through",
        "You're a perfect imperfection, and that's the point",
        "Your rough edges are part of your authentic texture",
        "You don't need fixing - you need accepting",
        "Your contradictions make you complex and real",
        "You're allowed to be both a masterpiece and a work in progress",
        "Your wholeness includes every part of you, even the hidden ones",
    )),
    ("beyond-labels", (
        "You're so much more than the labels people give you",
        "Your worth isn't determined by external validation",
        "You exist beyond the boxes others try to put you in",
        "Your identity is yours to define, not theirs to decide",
        "You're not your job, your status, or your achievements",
        "The real you transcends all categories",
        "You're deeper than any title or role could capture",
        "Your essence can't be measured by external metrics",
        "Who you are goes far beyond what you do",
        "You're a mystery even to yourself, and that's beautiful",
    )),
    ("authenticity", (
        "Your authentic self is your greatest gift to the world",
        "The more yourself you become, the more you belong",
        "Your truth doesn't need permission to exist",
        "Be unapologetically, messily, beautifully you",
        "Your genuine self is magnetic in ways performance never could be",
        "Authenticity is your superpower",
        "The world doesn't need another copy - it needs the original you",
        "Your realness is more valuable than any perfection",
        "When you show up as yourself, you give others permission to do the same",
        "Your authentic voice is the one the world is waiting to hear",
    )),
    ("self-acceptance", (
        "You're worthy of your own love exactly as you are",
        "Embracing yourself is the revolution",
        "You don't have to earn the right to love yourself",
        "Self-acceptance is not self-indulgence; it's self-respect",
        "You're allowed to take up space just as you are",
        "Loving yourself isn't vanity - it's vision",
        "You deserve your own compassion and kindness",
        "Be gentle with yourself - you're doing your best",
        "You're worthy of the same grace you extend to others",
        "Accepting yourself opens doors that striving never could",
    )),
    ("gifts", (
        "What you bring to the world can't be replicated",
        "Your perspective is a gift only you can give",
        "The way you love is uniquely yours",
        "Your presence changes the energy of every room",
        "You have an irreplaceable role in the grand design",
        "Your specific combination of talents serves a purpose",
        "The world is incomplete without your contribution",
        "You offer something no one else can provide",
        "Your way of being is needed exactly as it is",
        "You're here for a reason only you can fulfill",
    )),
    ("freedom", (
        "You have permission to be exactly who you are",
        "You don't owe anyone a different version of yourself",
        "Free yourself from becoming what others expect",
        "You're allowed to change, grow, and redefine yourself",
        "Your evolution doesn't need anyone's approval",
        "You can unbecome everything that isn't truly you",
        "Break free from the person you thought you should be",
        "You're not required to stay who you were yesterday",
        "Give yourself permission to explore all of who you are",
        "You're free to write your own story, your own way",
    )),
)

_VIEW_PHRASES = (
    ("bigger-picture", (
        "Look at how far you've come",
        "Step back and see the full landscape of your journey",
        "You're further along than you were a year ago",
        "From above, all the pieces form a beautiful pattern",
        "Consider what you've survived to get to this moment",
        "The mountain looks smaller from the summit of your experience",
        "You've already conquered what once seemed impossible",
        "Your progress is visible when you expand the frame",
        "The big picture includes all your small victories",
        "Perspective shows you've been growing all along",
    )),
    ("temporal", (
        "Zoom out—this moment is just one of many",
        "In a year, you'll barely remember today's worry",
        "Five years from now, this will just be part of your story",
        "This is a chapter, not the whole book",
        "Today is one frame in a much longer film",
        "This moment will pass, as all moments do",
        "Years from now, you'll see why this mattered differently",
        "Time has a way of putting things in proportion",
        "This is temporary territory on a permanent journey",
        "The timeline is longer than this single point suggests",
    )),
    ("reframing", (
        "What if this obstacle is actually an opportunity?",
        "Perhaps this difficulty is building something in you",
        "This could be happening for you, not to you",
        "What if the delay is protection?",
        "Maybe this 'setback' is actually a setup",
        "Consider that this challenge is revealing your strength",
        "What if you're exactly on time, not behind?",
        "This might be the plot twist your story needed",
        "Perhaps this is redirection, not rejection",
        "What if this struggle is your training ground?",
    )),
    ("focus-shift", (
        "Is the glass half full today?",
        "Where attention goes, energy flows—what will you focus on?",
        "Shift your gaze from what's missing to what's present",
        "Look at what's right instead of what's wrong",
        "Focus on what you can control, release what you can't",
        "What you appreciate, appreciates",
        "Find the light in the room instead of the shadows",
        "Notice what's working, not just what's broken",
        "Your focus determines your reality—choose wisely",
        "Look for the lesson, not just the loss",
    )),
    ("multiple-views", (
        "There's another way to see this—let's find it",
        "Every situation has at least three sides",
        "Flip the script—what's the opposite interpretation?",
        "View this through the lens of growth instead of failure",
        "See yourself as the hero of this story, not the victim",
        "What would your wisest self say about this?",
        "How would you view this if it were happening to someone you love?",
        "Imagine looking back at this moment as a turning point",
        "What if this makes sense from an angle you haven't considered?",
        "Try viewing this with curiosity instead of judgment",
    )),
    ("wisdom", (
        "Sometimes we're too close to see clearly",
        "Distance reveals what proximity obscures",
        "The view changes when you change where you stand",
        "Your current vantage point isn't the only one available",
        "Wisdom comes from seeing the same thing differently",
        "New perspectives create new possibilities",
        "The map is not the territory—there's always more to see",
        "Your interpretation shapes your experience",
        "Clarity comes when you're willing to shift your stance",
        "The same sun that melts ice hardens clay—perspective matters",
    )),
    ("past-achievements", (
        "Remember when you thought you couldn't overcome that? But you did",
        "You've been underestimated before, including by yourself",
        "Look back at all the times you thought you'd break—yet here you stand",
        "Your track record includes more wins than you remember",
        "You've already proven you can handle hard things",
        "Compare where you are to where you started",
        "Your past self would be amazed by your current self",
        "You've surprised yourself before—you can do it again",
        "Count the battles you've won, not just the ones ahead",
        "Your resume of resilience is impressive",
    )),
    ("future-possibility", (
        "What if the best is still ahead of you?",
        "Future you will have a completely different view of today",
        "You're planting seeds you can't yet see as trees",
        "This could be the 'before' in your success story",
        "Imagine your future gratitude for not giving up now",
        "The view from your destination will make the journey make sense",
        "You're creating a future perspective you'll be proud of",
        "What you're building now will reveal itself in time",
        "The butterfly can't see its wings while in the cocoon",
        "Your future self is cheering you on from there to here",
    )),
    ("contrast", (
        "Compare your current chapter to your worst one—see the difference?",
        "Look at what you have, not just what you lack",
        "Measure your present against your past struggles, not others' highlight reels",
        "You're comparing your behind-the-scenes to everyone's polished performance",
        "Context changes everything—what's the fuller story?",
        "Small problems from afar meant everything up close on a different day",
        "Today's crisis is tomorrow's 'remember when' story",
        "Your worst day now might be easier than your old worst days",
        "Look at how your 'normal' has elevated",
        "Gratitude shifts the entire landscape",
    )),
)


# ---------------------------------------------------------------------------
# Classifier rules, evaluated top to bottom
# ---------------------------------------------------------------------------

_HEAR_RULES = (
    ("question", ("?",)),
    ("reflective", ("I hear", "sounds like", "experiencing")),
    ("encouragement", ("matter", "brave", "strength")),
)

_INSPYRE_RULES = (
    ("past-strength", ("overcome", "survived", "before")),
    ("value-affirmation", ("worth", "value", "enough")),
    ("inner-light", ("light", "spark", "inner", "soul")),
    ("resilience", ("grow", "heal", "transform")),
    ("hope", ("future", "tomorrow", "ahead", "coming")),
    ("present-strength", ("moment", "now", "today")),
    ("connection", ("belong", "connect", "universe", "world")),
)

_FLOW_RULES = (
    ("stream-metaphor", ("stream", "river", "current")),
    ("universal-energy", ("universe", "energy", "source")),
    ("natural-rhythm", ("season", "cycle", "rhythm", "tide")),
    ("release", ("release", "let go", "surrender")),
    ("trust", ("trust", "support", "held", "conspir")),
    ("movement", ("movement", "momentum", "progress")),
    ("water-wisdom", ("water", "ocean", "wave", "dew")),
    ("continuity", ("endless", "eternal", "forever", "renewed")),
)

_YOU_RULES = (
    ("uniqueness", ("unique", "original", "never been")),
    ("journey", ("journey", "path", "story", "scar")),
    ("wholeness", ("whole", "imperfect", "crack", "flaw")),
    ("beyond-labels", ("label", "box", "worth", "status")),
    ("authenticity", ("authentic", "genuine", "real")),
    ("self-acceptance", ("accept", "love yourself", "compassion")),
    ("gifts", ("gift", "contribution", "offer", "bring")),
    ("freedom", ("permission", "free", "allowed")),
)

_VIEW_RULES = (
    ("bigger-picture", ("far you", "big picture", "progress")),
    ("temporal", ("moment", "year", "time", "chapter")),
    ("reframing", ("what if", "perhaps", "maybe", "could be")),
    ("focus-shift", ("focus", "glass", "attention", "notice")),
    ("multiple-views", ("another way", "sides", "lens", "angle")),
    ("wisdom", ("wisdom", "clarity", "distance", "vantage")),
    ("past-achievements", ("remember when", "track record", "already proven")),
    ("future-possibility", ("ahead", "future", "destination", "building")),
    ("contrast", ("compare", "measure", "contrast", "look at what")),
)


def _voice(name: str, categories, rules, default_category: str) -> Voice:
    return Voice(
        name=name,
        title=persona.TITLES[name],
        description=persona.DESCRIPTIONS[name],
        system_prompt=persona.system_prompt(name),
        categories=categories,
        rules=rules,
        default_category=default_category,
    )


VOICES: Mapping[str, Voice] = MappingProxyType({
    "hear": _voice("hear", _HEAR_PHRASES, _HEAR_RULES, "supportive"),
    "inspyre": _voice("inspyre", _INSPYRE_PHRASES, _INSPYRE_RULES, "inspiration"),
    "flow": _voice("flow", _FLOW_PHRASES, _FLOW_RULES, "flow"),
    "you": _voice("you", _YOU_PHRASES, _YOU_RULES, "self-celebration"),
    "view": _voice("view", _VIEW_PHRASES, _VIEW_RULES, "perspective-shift"),
})

VOICE_NAMES: Tuple[str, ...] = tuple(VOICES)

DEFAULT_VOICE = persona.DEFAULT_VOICE


def get_voice(name: str, default: str = DEFAULT_VOICE) -> Voice:
    """Look up a voice by name (case-insensitive), falling back to the default voice."""
    key = (name or "").strip().lower()
    return VOICES.get(key) or VOICES[default]
