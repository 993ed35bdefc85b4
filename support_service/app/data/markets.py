CURRENCY_SYMBOLS = {
    "USD": "$",
    "BRL": "R$",
    "EUR": "€",
    "GBP": "£",
    "INR": "₹",
    "MXN": "MX$",
    "CAD": "CA$",
}

MARKETS = {
    "US": {
        "country": "United States",
        "language_code": "en-US",
        "currency_code": "USD",
        "timezone": "America/New_York",
        "display_config": {
            "date_format": "MM/DD/YYYY",
            "time_format": "12h",
            "number_format": "1,234.56",
            "address_format": "street, city, state zip",
            "name_order": "first_last",
        },
        "validation_rules": {"postal_code": r"^\d{5}(-\d{4})?$"},
        "legal_fields": {"tax_id": "EIN"},
    },
    "BR": {
        "country": "Brazil",
        "language_code": "pt-BR",
        "currency_code": "BRL",
        "timezone": "America/Sao_Paulo",
        "display_config": {
            "date_format": "DD/MM/YYYY",
            "time_format": "24h",
            "number_format": "1.234,56",
            "address_format": "street, number - district, city - state, zip",
            "name_order": "first_last",
        },
        "validation_rules": {"postal_code": r"^\d{5}-?\d{3}$"},
        "legal_fields": {"tax_id": "CNPJ", "personal_id": "CPF"},
    },
    "GB": {
        "country": "United Kingdom",
        "language_code": "en-GB",
        "currency_code": "GBP",
        "timezone": "Europe/London",
        "display_config": {
            "date_format": "DD/MM/YYYY",
            "time_format": "24h",
            "number_format": "1,234.56",
            "address_format": "street, city, postcode",
            "name_order": "first_last",
        },
        "validation_rules": {"postal_code": r"^[A-Z]{1,2}\d[A-Z\d]? ?\d[A-Z]{2}$"},
        "legal_fields": {"tax_id": "VAT"},
    },
    "DE": {
        "country": "Germany",
        "language_code": "de-DE",
        "currency_code": "EUR",
        "timezone": "Europe/Berlin",
        "display_config": {
            "date_format": "DD.MM.YYYY",
            "time_format": "24h",
            "number_format": "1.234,56",
            "address_format": "street number, zip city",
            "name_order": "first_last",
        },
        "validation_rules": {"postal_code": r"^\d{5}$"},
        "legal_fields": {"tax_id": "USt-IdNr"},
    },
    "FR": {
        "country": "France",
        "language_code": "fr-FR",
        "currency_code": "EUR",
        "timezone": "Europe/Paris",
        "display_config": {
            "date_format": "DD/MM/YYYY",
            "time_format": "24h",
            "number_format": "1 234,56",
            "address_format": "number street, zip city",
            "name_order": "first_last",
        },
        "validation_rules": {"postal_code": r"^\d{5}$"},
        "legal_fields": {"tax_id": "SIRET"},
    },
    "IN": {
        "country": "India",
        "language_code": "en-IN",
        "currency_code": "INR",
        "timezone": "Asia/Kolkata",
        "display_config": {
            "date_format": "DD/MM/YYYY",
            "time_format": "12h",
            "number_format": "1,23,456.78",
            "address_format": "street, city, state - pin",
            "name_order": "first_last",
        },
        "validation_rules": {"postal_code": r"^\d{6}$"},
        "legal_fields": {"tax_id": "GSTIN"},
    },
    "MX": {
        "country": "Mexico",
        "language_code": "es-MX",
        "currency_code": "MXN",
        "timezone": "America/Mexico_City",
        "display_config": {
            "date_format": "DD/MM/YYYY",
            "time_format": "24h",
            "number_format": "1,234.56",
            "address_format": "street number, district, zip city, state",
            "name_order": "first_last",
        },
        "validation_rules": {"postal_code": r"^\d{5}$"},
        "legal_fields": {"tax_id": "RFC"},
    },
    "CA": {
        "country": "Canada",
        "language_code": "en-CA",
        "currency_code": "CAD",
        "timezone": "America/Toronto",
        "display_config": {
            "date_format": "YYYY-MM-DD",
            "time_format": "12h",
            "number_format": "1,234.56",
            "address_format": "street, city province postal",
            "name_order": "first_last",
        },
        "validation_rules": {"postal_code": r"^[A-Z]\d[A-Z] ?\d[A-Z]\d$"},
        "legal_fields": {"tax_id": "BN"},
    },
}
