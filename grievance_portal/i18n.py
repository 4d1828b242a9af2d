# Form-screen string tables, keyed by submission language

from grievance_portal.models import Language

TRANSLATIONS = {
    Language.ENGLISH: {
        "languageLabel": "Language / Taal",
        "name": "Name",
        "contact": "Contact Information",
        "location": "Location",
        "useLocation": "Use My Current Location",
        "description": "Grievance Description",
        "category": "Category",
        "submit": "Submit Grievance",
        "gettingLocation": "Getting location...",
        "locationCaptured": "Location captured",
        "locationDenied": "Location access denied. Please enter manually.",
        "optional": "Optional",
        "required": "*",
        "selectCategory": "Select a category",
        "validationMessage": "Please enter a grievance description",
        "successMessage": "Grievance submitted! Reference:",
        "submitting": "Submitting...",
        "submitError": "Error submitting grievance. Please try again.",
    },
    Language.AFRIKAANS: {
        "languageLabel": "Language / Taal",
        "name": "Naam",
        "contact": "Kontakinligting",
        "location": "Ligging",
        "useLocation": "Gebruik My Huidige Ligging",
        "description": "Griewe Beskrywing",
        "category": "Kategorie",
        "submit": "Dien Griewe In",
        "gettingLocation": "Kry ligging...",
        "locationCaptured": "Ligging vasgevang",
        "locationDenied": "Ligging toegang geweier. Voer asseblief handmatig in.",
        "optional": "Opsioneel",
        "required": "*",
        "selectCategory": "Kies 'n kategorie",
        "validationMessage": "Voer asseblief 'n griewe beskrywing in",
        "successMessage": "Griewe ingedien! Verwysing:",
        "submitting": "Dien in...",
        "submitError": "Fout met indiening van griewe. Probeer asseblief weer.",
    },
}

# Afrikaans names shown beside each category option on the form
CATEGORY_TRANSLATIONS = {
    "environmental": "Omgewing",
    "land_dispute": "Grondgeskil",
    "resettlement": "Hervestiging",
    "labor_issue": "Arbeidskwessie",
    "health_safety": "Gesondheid & Veiligheid",
    "asset_damage_loss": "Bate Skade/Verlies",
    "access": "Toegang",
    "traffic": "Verkeer",
    "noise": "Geraas",
    "other": "Ander",
}


def translate(language: Language, key: str) -> str:
    return TRANSLATIONS.get(language, TRANSLATIONS[Language.ENGLISH])[key]
