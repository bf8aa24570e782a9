from app.domain.names import company_from_domain, name_from_email, normalize_email, normalize_name


def test_normalize_name_casing_and_whitespace():
    assert normalize_name("MARIO SILVA") == "Mario Silva"
    assert normalize_name("  ana   maria\tde  souza ") == "Ana Maria De Souza"
    assert normalize_name("jOÃO") == "João"


def test_normalize_name_empty():
    assert normalize_name(None) == ""
    assert normalize_name("   ") == ""


def test_normalize_email():
    assert normalize_email("  John@TechCorp.COM ") == "john@techcorp.com"
    assert normalize_email(None) == ""


def test_name_from_email():
    assert name_from_email("joao.silva@acme.com") == "Joao Silva"
    assert name_from_email("maria_clara@x.io") == "Maria Clara"
    assert name_from_email("not-an-email") == ""


def test_company_from_domain():
    assert company_from_domain("www.acme-tools.com.br") == "Acme Tools"
    assert company_from_domain("https://www.padaria.com/contato") == "Padaria"
    assert company_from_domain("") == ""
