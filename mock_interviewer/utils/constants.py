"""
Constants used throughout the Mock Interviewer application.
"""
import random
from typing import List, Optional

# Transport event names
CALL_START_EVENT = "call-start"
CALL_END_EVENT = "call-end"
MESSAGE_EVENT = "message"
SPEECH_START_EVENT = "speech-start"
SPEECH_END_EVENT = "speech-end"
ERROR_EVENT = "error"

TRANSPORT_EVENTS = (
    CALL_START_EVENT,
    CALL_END_EVENT,
    MESSAGE_EVENT,
    SPEECH_START_EVENT,
    SPEECH_END_EVENT,
    ERROR_EVENT,
)

# Message payload values
TRANSCRIPT_MESSAGE_TYPE = "transcript"
FINAL_TRANSCRIPT_TYPE = "final"

# Navigation paths
HOME_PATH = "/"
FEEDBACK_PATH_TEMPLATE = "/interview/{interview_id}/feedback"

# Feedback categories, in the order the scorer must return them
FEEDBACK_CATEGORIES = (
    "Communication Skills",
    "Technical Knowledge",
    "Problem Solving",
    "Cultural Fit",
    "Confidence and Clarity",
)

# Error messages
ERROR_NO_TRANSCRIPT = "No transcript provided"
ERROR_FEEDBACK_SAVE = "Error saving feedback"

# Cover images shown on interview cards
INTERVIEW_COVERS = [
    "/adobe.png",
    "/amazon.png",
    "/facebook.png",
    "/hostinger.png",
    "/pinterest.png",
    "/quora.png",
    "/reddit.png",
    "/skype.png",
    "/spotify.png",
    "/telegram.png",
    "/tiktok.png",
    "/yahoo.png",
]

# Maps the ways users write technology names to one canonical value
TECH_MAPPINGS = {
    # Frontend frameworks and libraries
    "react.js": "react",
    "reactjs": "react",
    "react": "react",
    "next.js": "nextjs",
    "nextjs": "nextjs",
    "next": "nextjs",
    "vue.js": "vuejs",
    "vuejs": "vuejs",
    "vue": "vuejs",
    "angular.js": "angular",
    "angularjs": "angular",
    "angular": "angular",
    "ember.js": "ember",
    "emberjs": "ember",
    "ember": "ember",
    "backbone.js": "backbone",
    "backbonejs": "backbone",
    "backbone": "backbone",
    # Backend
    "express.js": "express",
    "expressjs": "express",
    "express": "express",
    "node.js": "nodejs",
    "nodejs": "nodejs",
    "node": "nodejs",
    "nestjs": "nestjs",
    # Databases
    "mongodb": "mongodb",
    "mongo": "mongodb",
    "mongoose": "mongoose",
    "mysql": "mysql",
    "postgresql": "postgresql",
    "sqlite": "sqlite",
    "redis": "redis",
    "firebase": "firebase",
    # DevOps and infrastructure
    "docker": "docker",
    "kubernetes": "kubernetes",
    "aws": "aws",
    "azure": "azure",
    "gcp": "gcp",
    "digitalocean": "digitalocean",
    "heroku": "heroku",
    # Design tools
    "photoshop": "photoshop",
    "adobe photoshop": "photoshop",
    "figma": "figma",
    # Markup and styling
    "html5": "html5",
    "html": "html5",
    "css3": "css3",
    "css": "css3",
    "sass": "sass",
    "scss": "sass",
    "less": "less",
    "tailwindcss": "tailwindcss",
    "tailwind": "tailwindcss",
    "bootstrap": "bootstrap",
    "jquery": "jquery",
    # Languages
    "typescript": "typescript",
    "ts": "typescript",
    "javascript": "javascript",
    "js": "javascript",
    # APIs
    "graphql": "graphql",
    "graph ql": "graphql",
    "apollo": "apollo",
    # Build tools
    "webpack": "webpack",
    "babel": "babel",
    "rollup.js": "rollup",
    "rollupjs": "rollup",
    "rollup": "rollup",
    "parcel.js": "parcel",
    "parceljs": "parcel",
    # Package managers and version control
    "npm": "npm",
    "yarn": "yarn",
    "git": "git",
    "github": "github",
    "gitlab": "gitlab",
    "bitbucket": "bitbucket",
    # ORM and state management
    "prisma": "prisma",
    "redux": "redux",
    "flux": "flux",
    "vuex": "vuex",
    # Testing
    "selenium": "selenium",
    "cypress": "cypress",
    "jest": "jest",
    "mocha": "mocha",
    "chai": "chai",
    "karma": "karma",
    # Frameworks and CMS
    "nuxt.js": "nuxt",
    "nuxtjs": "nuxt",
    "nuxt": "nuxt",
    "strapi": "strapi",
    "wordpress": "wordpress",
    "contentful": "contentful",
    # Hosting and deployment
    "netlify": "netlify",
    "vercel": "vercel",
    "aws amplify": "amplify",
}


def normalize_tech_name(tech: str) -> str:
    """
    Map a user-supplied technology name to its canonical form.

    Unknown names are returned lowercased with ``.js`` stripped.
    """
    key = tech.lower().strip()
    if key in TECH_MAPPINGS:
        return TECH_MAPPINGS[key]
    key = key.replace(".js", "")
    return TECH_MAPPINGS.get(key, key)


def split_techstack(techstack: Optional[str]) -> List[str]:
    """Split a comma separated tech stack string into trimmed entries."""
    if not techstack:
        return []
    return [tech.strip() for tech in techstack.split(",") if tech.strip()]


def get_random_interview_cover() -> str:
    """Pick a cover image for a new interview card."""
    return random.choice(INTERVIEW_COVERS)
