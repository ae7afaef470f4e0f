"""
Bot texts and button labels (it / en / pl)
"""

from shared.constants import DEFAULT_LANGUAGE
from shared.enums import Language, Period


def _pick(table: dict, language) -> str:
    try:
        key = Language(language).value
    except ValueError:
        key = DEFAULT_LANGUAGE
    return table.get(key) or table[DEFAULT_LANGUAGE]


class BotMessages:
    """Localized message templates"""

    WELCOME = {
        'it': "👋 Benvenuto!\nChat ID: <code>{chat_id}</code>\n\nInserisci questo ID nel tuo profilo della dashboard per collegare il bot.",
        'en': "👋 Welcome!\nChat ID: <code>{chat_id}</code>\n\nAdd this ID to your dashboard profile to link the bot.",
        'pl': "👋 Witaj!\nChat ID: <code>{chat_id}</code>\n\nDodaj ten ID do swojego profilu w panelu, aby połączyć bota.",
    }

    UNKNOWN_USER = {
        'it': "⚠️ Utente sconosciuto. Aggiungi questo Chat ID nella dashboard: <code>{chat_id}</code>",
        'en': "⚠️ User unknown. Add this Chat ID to your dashboard profile: <code>{chat_id}</code>",
        'pl': "⚠️ Nieznany użytkownik. Dodaj ten Chat ID w panelu: <code>{chat_id}</code>",
    }

    ERROR = {
        'it': "⚠️ Errore durante l'elaborazione della richiesta.",
        'en': "⚠️ Error processing request.",
        'pl': "⚠️ Błąd podczas przetwarzania żądania.",
    }

    DB_ERROR = {
        'it': "❌ Errore DB, transazione non salvata.",
        'en': "❌ DB error, transaction not saved.",
        'pl': "❌ Błąd bazy danych, transakcja nie została zapisana.",
    }

    SAVED = {
        'it': "✅ <b>{category}</b> ({icon})\n{amount} {currency} - {description}",
        'en': "✅ <b>{category}</b> ({icon})\n{amount} {currency} - {description}",
        'pl': "✅ <b>{category}</b> ({icon})\n{amount} {currency} - {description}",
    }

    SAVED_WITH_METHOD = {
        'it': "✅ <b>Salvato</b> ({icon} {method})\n{description}: {amount} {currency}",
        'en': "✅ <b>Saved</b> ({icon} {method})\n{description}: {amount} {currency}",
        'pl': "✅ <b>Zapisano</b> ({icon} {method})\n{description}: {amount} {currency}",
    }

    ASK_PAYMENT_METHOD = {
        'it': "{reply}\n\n💰 {amount} {currency} ({category})\nCome hai pagato?",
        'en': "{reply}\n\n💰 {amount} {currency} ({category})\nHow did you pay?",
        'pl': "{reply}\n\n💰 {amount} {currency} ({category})\nJak zapłaciłeś?",
    }

    ADD_HINT = {
        'it': "📝 Scrivi la transazione, es. <i>12,50 ristorante carta</i> oppure <i>mance 20</i>",
        'en': "📝 Write the transaction, e.g. <i>12.50 restaurant card</i> or <i>tips 20</i>",
        'pl': "📝 Napisz transakcję, np. <i>12,50 restauracja karta</i> lub <i>napiwki 20</i>",
    }

    EXPIRED = {
        'it': "Scaduto",
        'en': "Expired",
        'pl': "Wygasło",
    }

    HELP = {
        'it': (
            "<b>ℹ️ Come usare il bot</b>\n\n"
            "📝 Scrivi una spesa o un'entrata, es. <i>10 euro pizza contanti</i>\n"
            "📊 Chiedi un resoconto, es. <i>quanto ho speso oggi?</i>\n"
            "🆔 /start mostra il tuo Chat ID"
        ),
        'en': (
            "<b>ℹ️ How to use the bot</b>\n\n"
            "📝 Write an expense or income, e.g. <i>10 euro pizza cash</i>\n"
            "📊 Ask for a report, e.g. <i>how much did I spend today?</i>\n"
            "🆔 /start shows your Chat ID"
        ),
        'pl': (
            "<b>ℹ️ Jak używać bota</b>\n\n"
            "📝 Napisz wydatek lub przychód, np. <i>10 euro pizza gotówka</i>\n"
            "📊 Poproś o raport, np. <i>ile wydałem dzisiaj?</i>\n"
            "🆔 /start pokazuje Twój Chat ID"
        ),
    }

    @staticmethod
    def text(template: dict, language=DEFAULT_LANGUAGE, **values) -> str:
        """Render a template in the given language"""
        return _pick(template, language).format(**values)


class ReportLabels:
    """Localized labels of the bot report"""

    TITLES = {
        Period.DAILY: {'it': "Oggi", 'en': "Today", 'pl': "Dzisiaj"},
        Period.WEEKLY: {'it': "Ultimi 7 giorni", 'en': "Last 7 days", 'pl': "Ostatnie 7 dni"},
        Period.MONTHLY: {'it': "Ultimo mese", 'en': "Last month", 'pl': "Ostatni miesiąc"},
        Period.YEARLY: {'it': "Ultimo anno", 'en': "Last year", 'pl': "Ostatni rok"},
        Period.ALL: {'it': "Tutto", 'en': "All time", 'pl': "Wszystko"},
    }
    INCOME = {'it': "Entrate", 'en': "Income", 'pl': "Przychody"}
    EXPENSE = {'it': "Uscite", 'en': "Expenses", 'pl': "Wydatki"}
    BALANCE = {'it': "Saldo", 'en': "Balance", 'pl': "Saldo"}

    @staticmethod
    def label(table: dict, language) -> str:
        return _pick(table, language)


class BotButtons:
    """Button labels"""

    ADD = {'it': "📝 Aggiungi", 'en': "📝 Add", 'pl': "📝 Dodaj"}
    REPORT = {'it': "📊 Resoconto", 'en': "📊 Report", 'pl': "📊 Raport"}
    INFO = {'it': "ℹ️ Info", 'en': "ℹ️ Info", 'pl': "ℹ️ Info"}

    CARD = "💳 Card"
    CASH = "💵 Cash"

    @staticmethod
    def label(table: dict, language) -> str:
        return _pick(table, language)
