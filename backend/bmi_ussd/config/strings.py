# /bmi_ussd/config/strings.py

# This file contains all user-facing USSD strings. Templates are keyed by
# message first and language code second, so the menu logic never branches on
# language. Bodies carry no CON/END marker; the protocol adapter adds it.

from typing import Dict

# Shown on the language menu, in the language itself.
LANGUAGE_NAMES: Dict[str, str] = {
    "rw": "Kinyarwanda",
    "en": "English",
}

TEMPLATES: Dict[str, Dict[str, str]] = {
    "WELCOME": {
        "en": "Welcome to the BMI Calculator\nPlease select a language:\n{language_options}",
        "rw": "Murakaza neza kuri BMI Calculator\nHitamo ururimi\n{language_options}",
    },
    "ENTER_AGE": {
        "en": "Enter your age (e.g., 25):\n0. Back to main menu\n00. Exit\n\nChoose a number:",
        "rw": "Injiza imyaka yawe (urugero, 25) :\n0. Subira ku menu\n00. Sohoka\n\nHitamo nimero :",
    },
    "ENTER_WEIGHT": {
        "en": "Enter your weight in kilograms (e.g., 70):\n0. Back\n00. Exit\n\nChoose a number:",
        "rw": "Injiza ibiro byawe muri kilogarama (urugero, 70) :\n0. Subira inyuma\n00. Sohoka\n\nHitamo nimero :",
    },
    "ENTER_HEIGHT": {
        "en": "Enter your height in centimeters (e.g., 170):\n0. Back\n00. Exit\n\nChoose a number:",
        "rw": "Injiza uburebure bwawe muri santimetero (urugero, 170) :\n0. Subira inyuma\n00. Sohoka\n\nHitamo nimero :",
    },
    "BMI_RESULT": {
        "en": "Your BMI is {bmi}\nCategory: {category}\n1. Health tips\n2. View history\n0. New calculation\n00. Exit\n\nChoose a number:",
        "rw": "BMI yawe ni {bmi}\nIcyiciro : {category}\n1. Inama z'ubuzima\n2. Reba amateka\n0. Kubara ubundi\n00. Sohoka\n\nHitamo nimero :",
    },
    "HEALTH_TIPS": {
        "en": "Tips: {tips}\n0. Back\n00. Exit\n\nChoose a number:",
        "rw": "Inama : {tips}\n0. Subira inyuma\n00. Sohoka\n\nHitamo nimero :",
    },
    "HISTORY": {
        "en": "History of your last {limit} BMI calculations:\n{history}\n0. Back\n00. Exit\n\nChoose a number:",
        "rw": "Amateka ya BMI yawe y'ibyashize {limit} :\n{history}\n0. Subira inyuma\n00. Sohoka\n\nHitamo nimero :",
    },
    "INVALID": {
        "en": "Invalid input. Please try again.",
        "rw": "Injiza nabi. Ongera ugerageze.",
    },
    "INVALID_CHOICE": {
        "en": "Invalid choice. Please try again.",
        "rw": "Guhitamo nabi. Ongera ugerageze.",
    },
    "ERROR": {
        "en": "The system is under maintenance. Please try again later.",
        "rw": "Sisitemu iri mu bikorwa byo kuyisana. Ongera ugerageze nyuma.",
    },
    "GOODBYE": {
        "en": "Thank you for using the BMI Calculator. Goodbye!",
        "rw": "Murakoze gukoresha BMI Calculator. Turabonana!",
    },
    "NO_HISTORY": {
        "en": "No history found.",
        "rw": "Nta mateka yaboneka.",
    },
    "HISTORY_LINE": {
        "en": "{index}. {date}: BMI {bmi} ({category})",
        "rw": "{index}. {date}: BMI {bmi} ({category})",
    },
}

CATEGORY_LABELS: Dict[str, Dict[str, str]] = {
    "underweight": {"en": "Underweight", "rw": "Ibiro bike"},
    "normal": {"en": "Normal", "rw": "Bisanzwe"},
    "overweight": {"en": "Overweight", "rw": "Ibiro byinshi"},
    "obese": {"en": "Obese", "rw": "Umunani"},
}

HEALTH_TIPS: Dict[str, Dict[str, str]] = {
    "underweight": {
        "en": "Eat nutrient-rich foods, increase calorie intake, consult a dietitian.",
        "rw": "Fata ibiryo biryoshye, ongeramo kalori, wasanga umuganga w'imirire.",
    },
    "normal": {
        "en": "Maintain a balanced diet, exercise regularly, stay hydrated.",
        "rw": "Komeza kurya ibiryo biringanije, korikora imyirambere, unywe amazi ahagije.",
    },
    "overweight": {
        "en": "Reduce calorie intake, increase physical activity, consult a doctor.",
        "rw": "Gukuramo kalori, ongeramo imyirambere, wasanga umuganga.",
    },
    "obese": {
        "en": "Consult a doctor, adopt a healthy diet, exercise under supervision.",
        "rw": "Sura umuganga, tangira kurya ibiryo by'ubuzima, korikora imyirambere ufashijwe.",
    },
}
