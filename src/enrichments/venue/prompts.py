"""Prompt templates for venue analysis."""

from enrichments.venue.schemas import LeadInfo

# Website content beyond this is cut before prompting
MAX_CONTENT_CHARS = 3000

SYSTEM_PROMPT = (
    "You are a business analyst specializing in catering industry lead enrichment. "
    "You analyze venue information to identify event management contacts and catering opportunities. "
    "Always respond with a single valid JSON object."
)

VENUE_SCHEMA = """{
  "venueName": "name of the venue",
  "website": "website URL if available",
  "aiOverview": "2-3 sentence description of the venue",
  "eventManagerName": "contact person name if found (especially event coordinator/manager)",
  "eventManagerEmail": "contact email (VERY IMPORTANT, search thoroughly for email addresses)",
  "eventManagerPhone": "contact phone number with area code",
  "commonEventTypes": ["types", "of", "events", "they", "host"],
  "venueCapacity": number of people they can accommodate or null,
  "inHouseCatering": boolean or null (whether they provide their own catering),
  "amenities": ["list", "of", "amenities"],
  "pricingInformation": "pricing details if available",
  "preferredCaterers": ["list", "of", "preferred", "caterers"]
}"""

CONTACT_INSTRUCTIONS = """YOUR MOST IMPORTANT TASK is to find contact emails. Look carefully for email addresses in the website content,
for example name@domain.com patterns in "Contact Us" sections, footers and staff directories.

Focus on the event manager's or event coordinator's contact information.
Common titles: "Event Manager", "Event Coordinator", "Event Director", "Catering Manager".
Look for phrases like "For event inquiries, contact..." or "To schedule an event, email..."."""


def format_business_info(lead_info: LeadInfo) -> str:
    lines = [f"Name: {lead_info.name}"]
    if lead_info.type:
        lines.append(f"Type: {lead_info.type}")
    if lead_info.address:
        lines.append(f"Address: {lead_info.address}")
    if lead_info.website:
        lines.append(f"Website: {lead_info.website}")
    if lead_info.phone:
        lines.append(f"Phone: {lead_info.phone}")
    if lead_info.email:
        lines.append(f"Email: {lead_info.email}")
    return "\n".join(lines)


def format_website_content(content: str | None) -> str:
    if not content:
        return "No website content available."
    excerpt = content[:MAX_CONTENT_CHARS]
    if len(content) > MAX_CONTENT_CHARS:
        excerpt += "...(content truncated)"
    return f"WEBSITE CONTENT (extract):\n{excerpt}"


def build_venue_prompt(lead_info: LeadInfo, content: str | None = None) -> str:
    """Build the venue analysis prompt from lead identity and website content.

    The response shape (``VENUE_SCHEMA``) is passed to the completion service
    separately.
    """
    return f"""You are analyzing a venue business for a catering company.
Extract key details from the following information. Focus on finding contact emails and event details.

BUSINESS INFORMATION:
{format_business_info(lead_info)}

{format_website_content(content)}

{CONTACT_INSTRUCTIONS}"""
