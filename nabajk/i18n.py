"""Landing page copy in Slovenian and English."""

from nabajk.config import DEFAULT_LOCALE

LOCALES = ("sl", "en")

TRANSLATIONS = {
    "sl": {
        # Hero
        "heroHeadline": "Ne veš kam na kolo?",
        "heroSubheadlinePrefix": "Izbrane cestne poti v ",
        "heroSubheadlineAccent": "Sloveniji.",
        "heroDescription": "Najboljše ceste, razdeljene po regijah, in skupinske vožnje - vse za tvoj naslednji izlet.",

        # Waitlist
        "waitlistTitle": "Bodi med prvimi",
        "waitlistDescription": "Pridruži se čakalni listi in izveš, ko aplikacija izide.",
        "waitlistPlaceholder": "Vnesi svoj e-mail",
        "waitlistButton": "Pridruži se",
        "waitlistSuccess": "Odlično! Obvestili te bomo ob izidu.",
        "waitlistErrorGeneric": "Nekaj je šlo narobe. Poskusi znova.",
        "waitlistErrorInvalid": "Vnesi veljaven e-mail naslov.",
        "waitlistErrorDuplicate": "Ta e-mail je že na čakalni listi.",
        "waitlistConsent": "S prijavo se strinjaš, da ti občasno pošljemo novice o aplikaciji. Brez neželene pošte.",

        # Features
        "featuresTagline": "ZAKAJ NABAJK",
        "featuresTitle": "Vse za cestno kolesarjenje v Sloveniji. Na enem mestu.",
        "feature1Title": "Kurirane poti po regijah",
        "feature1Description": "Ročno izbrane cestne ture. Krog za kavo, klanci ali daljše vožnje. Brez šuma.",
        "feature2Title": "Regionalno vreme (ARSO)",
        "feature2Description": "Hitra napoved po regiji z vetrom, preden se odločiš za smer.",
        "feature3Title": "Koledar rekreativnih tekem",
        "feature3Description": "Amaterski cestni dogodki v Sloveniji, z zbranimi datumi in direktnimi povezavami do organizatorjev.",
        "feature4Title": "Skupinske vožnje",
        "feature4Description": "Ustvari svojo vožnjo ali se pridruži obstoječi. Povabi prijatelje in skupaj odkrijte nove poti.",
        "featuresLaunchingSoon": "NaBajk prihaja kmalu. Sledi za launch.",

        # Contact
        "contactTitle": "Stopi v stik",
        "contactDescription": "Imaš vprašanja? Želiš izvedeti več o aplikaciji? Piši nam - z veseljem ti odgovorimo.",
        "contactButton": "Pošlji sporočilo",

        # Footer
        "footerTagline": "Narejeno za Slovenijo",
        "footerPrivacy": "Zasebnost",
        "footerContact": "Kontakt",
        "footerCopyright": "© 2026 NaBajk. Vse pravice pridržane.",

        # Privacy
        "privacyTitle": "Politika zasebnosti",
        "privacyBody": "Hranimo samo e-mail naslov in izbrani jezik, ki ju vneseš v čakalno listo. Podatkov ne delimo s tretjimi osebami. Za izbris nam piši.",

        # Language toggle
        "langSlo": "SLO",
        "langEng": "ENG",
    },
    "en": {
        # Hero
        "heroHeadline": "Don't know where to ride?",
        "heroSubheadlinePrefix": "Curated road routes in ",
        "heroSubheadlineAccent": "Slovenia.",
        "heroDescription": "The best roads organized by region, plus group rides - everything for your next adventure.",

        # Waitlist
        "waitlistTitle": "Be among the first",
        "waitlistDescription": "Join the waitlist and find out when the app launches.",
        "waitlistPlaceholder": "Enter your email",
        "waitlistButton": "Join waitlist",
        "waitlistSuccess": "You're in! We'll notify you when we launch.",
        "waitlistErrorGeneric": "Something went wrong. Please try again.",
        "waitlistErrorInvalid": "Please enter a valid email address.",
        "waitlistErrorDuplicate": "This email is already on the waitlist.",
        "waitlistConsent": "By signing up, you agree to receive occasional app updates. No spam.",

        # Features
        "featuresTagline": "WHY NABAJK",
        "featuresTitle": "Everything for road cycling in Slovenia. In one place.",
        "feature1Title": "Curated routes by region",
        "feature1Description": "Hand-picked road rides. Coffee loops, climbs, or longer days. No noise.",
        "feature2Title": "Regional weather (ARSO)",
        "feature2Description": "Quick forecast by region with wind, before you commit to a route.",
        "feature3Title": "Amateur race calendar",
        "feature3Description": "Slovenia's amateur road events in one calendar, with dates and direct organizer links.",
        "feature4Title": "Group rides",
        "feature4Description": "Create your own ride or join an existing one. Invite friends and discover new routes together.",
        "featuresLaunchingSoon": "NaBajk is launching soon. Follow for updates.",

        # Contact
        "contactTitle": "Get in touch",
        "contactDescription": "Have questions? Want to learn more about the app? Write to us - we'd love to hear from you.",
        "contactButton": "Send a message",

        # Footer
        "footerTagline": "Made for Slovenia",
        "footerPrivacy": "Privacy",
        "footerContact": "Contact",
        "footerCopyright": "© 2026 NaBajk. All rights reserved.",

        # Privacy
        "privacyTitle": "Privacy policy",
        "privacyBody": "We only store the email address and language you enter on the waitlist. We never share it with third parties. Write to us to have it deleted.",

        # Language toggle
        "langSlo": "SLO",
        "langEng": "ENG",
    },
}


def resolve_locale(value: str | None) -> str:
    """Map a query/cookie value to a supported locale."""
    value = (value or "").strip().lower()
    if value in LOCALES:
        return value
    return DEFAULT_LOCALE if DEFAULT_LOCALE in LOCALES else "sl"


def t(locale: str, key: str) -> str:
    """Translate ``key``; falls back to Slovenian, then to the key itself."""
    table = TRANSLATIONS.get(locale, TRANSLATIONS["sl"])
    return table.get(key) or TRANSLATIONS["sl"].get(key, key)
