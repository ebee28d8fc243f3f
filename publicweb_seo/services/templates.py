"""Copy templates for barbershop pages: titles, descriptions, headings and body text."""

from typing import List, Optional

from publicweb_seo.models.company import CompanyRecord, ServiceRecord
from publicweb_seo.services.normalizer import title_case

TITLE_MAX_LENGTH = 70
DESCRIPTION_MAX_LENGTH = 160

# Visible body copy must land in this word-count window
BODY_MIN_WORDS = 120
BODY_MAX_WORDS = 300

_ELLIPSIS = "…"
_LOCATION_SEPARATOR = ", "
_DEFAULT_KEYWORD_LOCATION = "Chile"

_FALLBACK_SERVICES = "Cortes, barba y estilismo."
_FALLBACK_SERVICES_BODY = "Cortes, barba y estilismo con profesionales locales."
_QUALITY_SENTENCE = (
    "Cada servicio se realiza con productos de calidad y técnicas actuales, "
    "cuidando los detalles desde el primer minuto."
)
_BOOKING_PARAGRAPH = (
    "Si buscas mantener tu estilo y ahorrar tiempo, puedes agendar de forma rápida "
    "y recibir confirmación directa. Puedes elegir el horario que más te acomode y "
    "revisar la duración estimada de cada atención. La información de contacto y "
    "ubicación está disponible para resolver cualquier duda antes de tu visita."
)
_CLOSING_PARAGRAPH = (
    "Agenda en pymerp y encuentra el servicio que mejor se adapte a tu rutina, con "
    "recordatorios y la posibilidad de reprogramar cuando lo necesites."
)
_FILLER_SENTENCE = (
    "Atendemos con cuidado cada detalle para que tu experiencia sea simple, ordenada "
    "y segura, desde la reserva hasta el final de tu visita, con un equipo que conoce "
    "tu estilo y respeta tu tiempo en cada atención."
)


def truncate(value: str, max_length: int) -> str:
    """Hard-cut *value* so that it fits in *max_length* characters, ellipsis included."""
    if len(value) <= max_length:
        return value
    return f"{value[: max_length - 1].strip()}{_ELLIPSIS}"


def format_price(price: float) -> str:
    """Format a CLP amount with dot thousands separators: ``12000`` -> ``$12.000``."""
    return "$" + f"{round(price):,}".replace(",", ".")


def resolve_location_label(company: CompanyRecord) -> Optional[str]:
    comuna = (company.comuna or "").strip()
    region = (company.region or "").strip()
    parts = [title_case(part) for part in (comuna, region) if part]
    return _LOCATION_SEPARATOR.join(parts) if parts else None


def _service_names(services: List[ServiceRecord]) -> List[str]:
    return [service.name for service in services[:3]]


# ---------------------------------------------------------------------------
# Titles and descriptions
# ---------------------------------------------------------------------------

def build_barberia_title(company: CompanyRecord, location_label: Optional[str]) -> str:
    location = f" en {location_label}" if location_label else ""
    return truncate(f"{company.name} | Barbería{location} – Reserva Online", TITLE_MAX_LENGTH)


def build_service_title(
    company: CompanyRecord, service: ServiceRecord, location_label: Optional[str]
) -> str:
    location = f" en {location_label}" if location_label else ""
    return truncate(
        f"{service.name} en {company.name} | Barbería{location} – Reserva Online",
        TITLE_MAX_LENGTH,
    )


def build_barberia_description(
    company: CompanyRecord,
    location_label: Optional[str],
    top_services: List[ServiceRecord],
) -> str:
    names = _service_names(top_services)
    services_snippet = f"{', '.join(names)}." if names else _FALLBACK_SERVICES
    location = f" ({location_label})" if location_label else ""
    return truncate(
        f"Reserva en {company.name}{location}. {services_snippet} "
        "Horarios, precios y atención rápida. Agenda online en pymerp.",
        DESCRIPTION_MAX_LENGTH,
    )


def build_service_description(
    company: CompanyRecord, service: ServiceRecord, location_label: Optional[str]
) -> str:
    location = f" ({location_label})" if location_label else ""
    return truncate(
        f"Reserva {service.name} en {company.name}{location}. "
        "Agenda online con precios y duración estimada.",
        DESCRIPTION_MAX_LENGTH,
    )


def build_barberia_h1(company: CompanyRecord, location_label: Optional[str]) -> str:
    if location_label:
        return f"{company.name} – Barbería en {location_label}"
    return f"{company.name} – Barbería"


def build_service_h1(company: CompanyRecord, service: ServiceRecord) -> str:
    return f"{service.name} – {company.name}"


def build_barberia_keywords(company: CompanyRecord, location_label: Optional[str]) -> List[str]:
    location = location_label or _DEFAULT_KEYWORD_LOCATION
    return [
        f"barbería {location}",
        f"corte de pelo {location}",
        f"barba {location}",
        f"{company.name} barbería",
        f"reservar barbería online {location}",
    ]


# ---------------------------------------------------------------------------
# Body copy
# ---------------------------------------------------------------------------

def fit_word_count(text: str) -> str:
    """Bring *text* into the ``[BODY_MIN_WORDS, BODY_MAX_WORDS]`` window.

    Text already in range is returned untouched.  Short text gets the filler
    sentence appended once; long text is cut at the last allowed word.
    """
    words = text.split()
    if BODY_MIN_WORDS <= len(words) <= BODY_MAX_WORDS:
        return text
    if len(words) < BODY_MIN_WORDS:
        return f"{text} {_FILLER_SENTENCE}"
    return " ".join(words[:BODY_MAX_WORDS])


def build_barberia_body_text(
    company: CompanyRecord,
    location_label: Optional[str],
    top_services: List[ServiceRecord],
) -> str:
    location = f"en {location_label}" if location_label else "en tu ciudad"
    names = _service_names(top_services)
    services_sentence = (
        f"Servicios destacados: {', '.join(names)}." if names else _FALLBACK_SERVICES_BODY
    )

    paragraphs = [
        f"{company.name} es una barbería {location} con agenda online y atención "
        "personalizada. Aquí encuentras horarios claros, precios transparentes y una "
        "experiencia cómoda para planificar tu visita sin esperas ni llamadas.",
        f"{services_sentence} {_QUALITY_SENTENCE}",
        _BOOKING_PARAGRAPH,
        _CLOSING_PARAGRAPH,
    ]
    return fit_word_count(" ".join(paragraphs))


def build_service_body_text(
    company: CompanyRecord, service: ServiceRecord, location_label: Optional[str]
) -> str:
    location = f"en {location_label}" if location_label else "en tu ciudad"

    details = []
    if service.description and service.description.strip():
        details.append(service.description.strip())
    if service.price is not None:
        details.append(f"Precio: {format_price(service.price)} CLP.")
    if service.estimated_duration_minutes:
        details.append(f"Duración estimada: {service.estimated_duration_minutes} minutos.")
    details.append(_QUALITY_SENTENCE)

    paragraphs = [
        f"{service.name} en {company.name} es un servicio de barbería {location} con "
        "agenda online y atención personalizada.",
        " ".join(details),
        _BOOKING_PARAGRAPH,
        _CLOSING_PARAGRAPH,
    ]
    return fit_word_count(" ".join(paragraphs))
