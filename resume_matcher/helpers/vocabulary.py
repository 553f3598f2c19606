SKILL_CATEGORIES = {
    "programming": [
        "javascript", "typescript", "python", "java", "c++", "c#", "php", "ruby", "go", "rust", "swift",
        "kotlin", "scala", "dart", "html", "css", "sass", "scss", "less",
    ],
    "frameworks": [
        "react", "angular", "vue", "svelte", "express", "django", "flask", "spring", "laravel", "rails",
        "fastapi", "node.js", "nodejs", "next.js", "nuxt", "gatsby", "bootstrap", "tailwind",
    ],
    "databases": [
        "mysql", "postgresql", "mongodb", "redis", "elasticsearch", "sqlite", "oracle", "cassandra", "dynamodb",
    ],
    "cloud": [
        "aws", "azure", "gcp", "google cloud", "heroku", "netlify", "vercel", "digitalocean",
    ],
    "devops": [
        "docker", "kubernetes", "jenkins", "terraform", "ansible", "ci/cd", "git", "github", "gitlab",
    ],
    "mobile": [
        "react native", "flutter", "ios", "android", "xamarin", "ionic", "cordova",
    ],
    "data": [
        "machine learning", "data science", "artificial intelligence", "tensorflow", "pytorch", "pandas",
        "numpy", "r", "matlab",
    ],
}

# "skilled in X", "proficient in X", ... ; X runs to the end of the sentence
SKILL_PHRASE_PATTERNS = [
    r"skilled?\s+in\s+([^.\n]+)",
    r"proficient\s+in\s+([^.\n]+)",
    r"experience\s+with\s+([^.\n]+)",
    r"knowledge\s+of\s+([^.\n]+)",
]

EDUCATION_KEYWORDS = [
    "bachelor", "master", "phd", "doctorate", "mba", "degree", "diploma",
    "university", "college", "institute", "school",
    "computer science", "engineering", "mathematics", "physics", "chemistry",
    "business", "economics", "finance", "marketing",
]

# tokens of two characters or less never reach this list; "with" stays a keyword
STOP_WORDS = {
    "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for", "of", "by",
    "is", "are", "was", "were", "be", "been", "have", "has", "had", "do", "does", "did",
    "will", "would", "could", "should", "can", "may", "might", "must", "shall",
}

SECTION_KEYWORDS = {
    "contact": ["contact", "personal", "info"],
    "summary": ["summary", "objective", "profile", "about"],
    "experience": ["experience", "work", "employment", "career", "professional"],
    "education": ["education", "academic", "university", "degree", "school"],
    "skills": ["skills", "technical", "technologies", "tools", "proficient"],
}

SECTION_BOUNDARY_HEADERS = [
    "experience", "education", "skills", "projects", "certifications",
    "achievements", "references", "contact", "summary", "objective",
]

SECTION_WEIGHTS = {"experience": 30, "skills": 25, "education": 20, "summary": 15, "contact": 10}

# Appended to filename-derived pseudo text so scoring keeps some signal
FALLBACK_VOCABULARY = (
    "resume cv curriculum vitae professional experience skills education background "
    "developer engineer manager analyst designer programmer software technology"
)
