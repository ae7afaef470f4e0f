"""
Application constants: category catalog, exchange rates, seed users
"""

# Category catalog
CATEGORIES = {
    'EXPENSE': [
        'Alimentari', 'Casa', 'Trasporti', 'Svago', 'Salute', 'Ristoranti', 'Shopping', 'Altro'
    ],
    'INCOME': [
        'Stipendio', 'Freelance', 'Investimenti', 'Regali', 'Rimborsi', 'Mance', 'Altro'
    ],
}

ALL_CATEGORIES = sorted(set(CATEGORIES['EXPENSE']) | set(CATEGORIES['INCOME']))

# Tips are always cash income
TIPS_CATEGORY = 'Mance'
TIPS_ALIASES = {'tips', 'tip', 'mance', 'mancia'}
DEFAULT_CATEGORY = 'Altro'

TRANSACTION_TYPES = ['INCOME', 'EXPENSE']
PAYMENT_METHODS = ['CASH', 'CARD']
DEFAULT_PAYMENT_METHOD = 'CARD'

# 1 EUR = rate units of currency
EXCHANGE_RATES = {
    'EUR': 1.0,
    'USD': 1.08,
    'PLN': 4.30,
}
REFERENCE_CURRENCY = 'EUR'

CURRENCY_SYMBOLS = {
    'EUR': '€',
    'USD': '$',
    'PLN': 'zł',
}

LANGUAGES = ['it', 'en', 'pl']
DEFAULT_LANGUAGE = 'it'
DEFAULT_CURRENCY = 'EUR'

# Plaintext login secret used when a profile has none
DEFAULT_PASSWORD = '1234'

MOCK_USERS = [
    {
        'id': 'user_matteo',
        'name': 'Matteo',
        'avatar': 'https://api.dicebear.com/7.x/avataaars/svg?seed=Matteo',
        'password': DEFAULT_PASSWORD,
        'preferences': {'currency': 'EUR', 'language': 'it'},
    },
    {
        'id': 'user_diana',
        'name': 'Diana',
        'avatar': 'https://api.dicebear.com/7.x/avataaars/svg?seed=Diana',
        'password': DEFAULT_PASSWORD,
        'preferences': {'currency': 'PLN', 'language': 'pl'},
    },
]
