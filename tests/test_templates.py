"""Tests for publicweb_seo.services.templates."""

from publicweb_seo.models.company import ServiceRecord
from publicweb_seo.services.templates import (
    BODY_MAX_WORDS,
    BODY_MIN_WORDS,
    DESCRIPTION_MAX_LENGTH,
    TITLE_MAX_LENGTH,
    build_barberia_body_text,
    build_barberia_description,
    build_barberia_keywords,
    build_barberia_title,
    build_service_body_text,
    build_service_title,
    fit_word_count,
    format_price,
    resolve_location_label,
    truncate,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _word_count(text: str) -> int:
    return len(text.split())


# ---------------------------------------------------------------------------
# truncate / format_price
# ---------------------------------------------------------------------------

class TestTruncate:
    def test_short_value_is_untouched(self):
        assert truncate("Hola", 10) == "Hola"

    def test_exact_length_is_untouched(self):
        assert truncate("x" * 70, 70) == "x" * 70

    def test_long_value_is_cut_with_ellipsis(self):
        result = truncate("a" * 100, 70)
        assert len(result) == 70
        assert result.endswith("…")

    def test_trailing_space_is_trimmed_before_ellipsis(self):
        result = truncate("abc def", 5)
        assert result == "abc…"


class TestFormatPrice:
    def test_thousands_use_dots(self):
        assert format_price(12000) == "$12.000"

    def test_large_amounts(self):
        assert format_price(1250000) == "$1.250.000"

    def test_decimals_are_rounded(self):
        assert format_price(999.6) == "$1.000"


# ---------------------------------------------------------------------------
# Location label
# ---------------------------------------------------------------------------

class TestResolveLocationLabel:
    def test_comuna_and_region(self, company):
        assert resolve_location_label(company) == "Providencia, Metropolitana"

    def test_only_comuna(self, company):
        company = company.model_copy(update={"region": None})
        assert resolve_location_label(company) == "Providencia"

    def test_only_region(self, company):
        company = company.model_copy(update={"comuna": "  "})
        assert resolve_location_label(company) == "Metropolitana"

    def test_neither_is_none(self, company):
        company = company.model_copy(update={"comuna": None, "region": None})
        assert resolve_location_label(company) is None

    def test_multi_word_values_are_title_cased(self, company):
        company = company.model_copy(update={"comuna": "las condes", "region": None})
        assert resolve_location_label(company) == "Las Condes"


# ---------------------------------------------------------------------------
# Titles / descriptions / keywords
# ---------------------------------------------------------------------------

class TestTitles:
    def test_title_with_location(self, company):
        title = build_barberia_title(company, "Providencia")
        assert title == "Barbería Central | Barbería en Providencia – Reserva Online"

    def test_title_without_location_omits_clause(self, company):
        title = build_barberia_title(company, None)
        assert title == "Barbería Central | Barbería – Reserva Online"
        assert " en " not in title

    def test_long_title_is_capped(self, company):
        company = company.model_copy(update={"name": "Barbería " * 20})
        title = build_barberia_title(company, "Providencia, Metropolitana")
        assert len(title) <= TITLE_MAX_LENGTH
        assert title.endswith("…")

    def test_service_title_starts_with_service_name(self, company, services):
        title = build_service_title(company, services[0], "Providencia, Metropolitana")
        assert title.startswith("Corte clásico")
        assert len(title) <= TITLE_MAX_LENGTH


class TestDescription:
    def test_lists_up_to_three_services(self, company, services):
        extra = ServiceRecord(id="s4", name="Tinte")
        description = build_barberia_description(company, None, services + [extra])
        assert "Corte clásico, Barba premium, Afeitado." in description
        assert "Tinte" not in description

    def test_fallback_without_services(self, company):
        description = build_barberia_description(company, None, [])
        assert "Cortes, barba y estilismo." in description

    def test_location_in_parentheses(self, company):
        description = build_barberia_description(company, "Providencia", [])
        assert description.startswith("Reserva en Barbería Central (Providencia).")

    def test_description_is_capped(self, company, services):
        company = company.model_copy(update={"name": "Nombre muy largo " * 15})
        description = build_barberia_description(company, "Providencia", services)
        assert len(description) <= DESCRIPTION_MAX_LENGTH


class TestKeywords:
    def test_keywords_use_location(self, company):
        keywords = build_barberia_keywords(company, "Providencia")
        assert keywords == [
            "barbería Providencia",
            "corte de pelo Providencia",
            "barba Providencia",
            "Barbería Central barbería",
            "reservar barbería online Providencia",
        ]

    def test_keywords_default_to_chile(self, company):
        keywords = build_barberia_keywords(company, None)
        assert keywords[0] == "barbería Chile"


# ---------------------------------------------------------------------------
# Body text
# ---------------------------------------------------------------------------

class TestFitWordCount:
    def test_text_in_range_is_returned_unchanged(self):
        text = " ".join(["palabra"] * 150)
        assert fit_word_count(text) == text

    def test_short_text_gets_one_filler_sentence(self):
        text = " ".join(["palabra"] * 100)
        result = fit_word_count(text)
        assert result.startswith(text)
        assert result.count("Atendemos con cuidado") == 1
        assert _word_count(result) > 100

    def test_long_text_is_cut_at_word_boundary(self):
        text = " ".join(f"w{i}" for i in range(400))
        result = fit_word_count(text)
        assert _word_count(result) == BODY_MAX_WORDS
        assert result.endswith(f"w{BODY_MAX_WORDS - 1}")


class TestBodyText:
    def test_overview_body_in_range(self, company, services):
        body = build_barberia_body_text(company, "Providencia, Metropolitana", services[:3])
        assert BODY_MIN_WORDS <= _word_count(body) <= BODY_MAX_WORDS
        assert "Servicios destacados: Corte clásico, Barba premium, Afeitado." in body

    def test_overview_body_minimal_inputs_in_range(self, company):
        company = company.model_copy(update={"name": "X"})
        body = build_barberia_body_text(company, None, [])
        assert BODY_MIN_WORDS <= _word_count(body) <= BODY_MAX_WORDS
        assert "en tu ciudad" in body

    def test_overview_body_with_huge_name_is_capped(self, company):
        company = company.model_copy(update={"name": "nombre " * 400})
        body = build_barberia_body_text(company, None, [])
        assert _word_count(body) == BODY_MAX_WORDS

    def test_service_body_mentions_price_and_duration(self, company, services):
        body = build_service_body_text(company, services[0], "Providencia")
        assert "Precio: $12.000 CLP." in body
        assert "Duración estimada: 30 minutos." in body
        assert BODY_MIN_WORDS <= _word_count(body) <= BODY_MAX_WORDS

    def test_service_body_without_details_gets_filler(self, company):
        service = ServiceRecord(id="s9", name="Corte")
        body = build_service_body_text(company, service, None)
        assert "Atendemos con cuidado" in body
        assert BODY_MIN_WORDS <= _word_count(body) <= BODY_MAX_WORDS
