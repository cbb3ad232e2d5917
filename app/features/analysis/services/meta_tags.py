from html import escape

from app.features.analysis.schemas.meta_tags import GeneratedMetaTags, MetaTagValidation

TITLE_MIN_LENGTH = 30
TITLE_MAX_LENGTH = 60
DESCRIPTION_MIN_LENGTH = 120
DESCRIPTION_MAX_LENGTH = 155
MAX_KEYWORDS = 10

# Site owners editing their own pages get a wider window.
OWNER_TITLE_MIN_LENGTH = 25
OWNER_TITLE_MAX_LENGTH = 65
OWNER_DESCRIPTION_MIN_LENGTH = 110
OWNER_DESCRIPTION_MAX_LENGTH = 160
OWNER_MAX_KEYWORDS = 15


def validate_meta_tags(tags: GeneratedMetaTags, is_owner: bool = False) -> MetaTagValidation:
    """Length and presence checks applied to generated copy before it is shown."""
    if is_owner:
        title_min, title_max = OWNER_TITLE_MIN_LENGTH, OWNER_TITLE_MAX_LENGTH
        description_min, description_max = OWNER_DESCRIPTION_MIN_LENGTH, OWNER_DESCRIPTION_MAX_LENGTH
        max_keywords = OWNER_MAX_KEYWORDS
    else:
        title_min, title_max = TITLE_MIN_LENGTH, TITLE_MAX_LENGTH
        description_min, description_max = DESCRIPTION_MIN_LENGTH, DESCRIPTION_MAX_LENGTH
        max_keywords = MAX_KEYWORDS

    issues = []

    if not tags.title:
        issues.append("Title is required")
    elif len(tags.title) > title_max:
        issues.append(f"Title is too long (over {title_max} characters)")
    elif len(tags.title) < title_min:
        issues.append(f"Title is too short (under {title_min} characters)")

    if not tags.description:
        issues.append("Description is required")
    elif len(tags.description) > description_max:
        issues.append(f"Description is too long (over {description_max} characters)")
    elif len(tags.description) < description_min:
        issues.append(f"Description is too short (under {description_min} characters)")

    if not tags.keywords:
        issues.append("Keywords are required")
    elif len(tags.keywords) > max_keywords:
        issues.append(f"Too many keywords (over {max_keywords})")

    return MetaTagValidation(is_valid=not issues, issues=issues)


def format_meta_tags_html(tags: GeneratedMetaTags) -> str:
    title = escape(tags.title)
    description = escape(tags.description)

    lines = [
        f"<title>{title}</title>",
        f'<meta name="description" content="{description}" />',
        f'<meta name="keywords" content="{escape(", ".join(tags.keywords))}" />',
        "",
        "<!-- Open Graph / Facebook -->",
        f'<meta property="og:title" content="{escape(tags.og_title or tags.title)}" />',
        f'<meta property="og:description" content="{escape(tags.og_description or tags.description)}" />',
        '<meta property="og:type" content="website" />',
        "",
        "<!-- Twitter -->",
        '<meta name="twitter:card" content="summary_large_image" />',
        f'<meta name="twitter:title" content="{escape(tags.twitter_title or tags.title)}" />',
        f'<meta name="twitter:description" content="{escape(tags.twitter_description or tags.description)}" />',
    ]
    return "\n".join(lines)
