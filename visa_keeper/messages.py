from __future__ import annotations

WELCOME_MESSAGE = "Добро пожаловать! Выберите действие:"
ADMIN_WELCOME_MESSAGE = "Добро пожаловать, администратор! Выберите действие:"
CHOOSE_ACTION = "Выберите действие:"
MAIN_MENU_TITLE = "Главное меню:"

MENU_LABELS = {
    "add_data": "\U0001F4DD Добавить данные",
    "my_data": "\U0001F464 Мои данные",
}

ADMIN_MENU_LABELS = {
    "get_data": "\U0001F4CA Получить данные",
    "add_data": "➕ Добавить данные",
    "check_expiry": "\U0001F50D Проверка сроков",
    "manage_admins": "\U0001F465 Управление админами",
}

ADMIN_MANAGEMENT_LABELS = {
    "add_admin": "➕ Добавить админа",
    "remove_admin": "❌ Удалить админа",
    "list_admins": "\U0001F4CB Список админов",
    "back": "◀️ Назад",
}

SHARE_PHONE_BUTTON = "\U0001F4F1 Отправить номер телефона"
ALL_DATA_BUTTON = "\U0001F4CB Все данные"

USER_PROMPTS = {
    "phone": "Пожалуйста, отправьте свой номер телефона:",
    "first_name": "Введите имя:",
    "last_name": "Введите фамилию:",
    "passport": "Введите номер паспорта (от 5 до 15 символов, буквы и цифры):",
    "visa_expiry": "Введите срок действия визы (ГГГГ-ММ-ДД):",
}

ADMIN_PROMPTS = {
    "phone": "Введите номер телефона пользователя:",
    "first_name": "Введите имя пользователя:",
    "last_name": "Введите фамилию пользователя:",
    "passport": "Введите номер паспорта (от 5 до 15 символов, буквы и цифры):",
    "visa_expiry": "Введите срок действия визы (ГГГГ-ММ-ДД):",
    "admin_id": "Введите Telegram ID нового администратора:",
    "admin_username": "Введите username нового администратора (без @):",
    "remove_admin_id": "Введите Telegram ID администратора для удаления:",
}

VALIDATION_MESSAGES = {
    "phone": (
        "Неверный формат номера телефона. Пожалуйста, введите номер в формате: "
        "+998 94 205 25 25 или 94 205 25 25"
    ),
    "name": "Имя должно содержать только буквы, пробелы и дефис. Длина от 2 до 50 символов.",
    "passport": (
        "Неверный формат паспорта. Пожалуйста, введите номер паспорта "
        "(от 5 до 15 символов, буквы и цифры)"
    ),
    "date_format": "Неверный формат даты. Пожалуйста, введите в формате: ГГГГ-ММ-ДД",
    "date_invalid": "Неверная дата. Пожалуйста, введите корректную дату.",
    "date_past": "Дата не может быть в прошлом. Пожалуйста, введите будущую дату.",
    "identity": "Пожалуйста, введите корректный Telegram ID (только цифры)",
}

USER_SAVED = "Данные успешно сохранены!"
ADMIN_USER_SAVED = "Данные успешно добавлены!"
USER_SAVE_FAILED = "Произошла ошибка при сохранении данных. Пожалуйста, попробуйте еще раз."
ADMIN_USER_SAVE_FAILED = "Произошла ошибка при добавлении данных. Пожалуйста, попробуйте еще раз."

NO_OWN_DATA = (
    "У вас пока нет сохраненных данных. "
    "Нажмите \"\U0001F4DD Добавить данные\" чтобы добавить информацию."
)
OWN_DATA_HEADER = "Ваши данные:\n\n"
OWN_DATA_FOOTER = "\n\nЧтобы обновить данные, нажмите \"\U0001F4DD Добавить данные\""
OWN_DATA_FAILED = "Произошла ошибка при получении данных. Пожалуйста, попробуйте позже."

NO_USERS = "Нет данных пользователей"
CHOOSE_WEEK = "Выберите неделю для просмотра виз или все данные:"
REPORT_FAILED = "Произошла ошибка при получении данных"
ALL_USERS_HEADER = "\U0001F465Все данные пользователей:\n\n"
WEEK_HEADER_TEMPLATE = "Визы, истекающие на неделе {week}:\n\n"
EMPTY_WEEK_TEMPLATE = "На неделю {week} нет виз, которые истекают."
REPORT_NOT_FOUND = "Данные не найдены. Пожалуйста, запросите данные снова."

EXPIRING_HEADER_TEMPLATE = "\U0001F4E8 Визы, истекающие в ближайшие {days} дней:\n\n"
NO_EXPIRING_TEMPLATE = "На ближайшие {days} дней нет виз, которые истекают."
EXPIRING_FAILED = "Произошла ошибка при проверке сроков виз. Пожалуйста, попробуйте позже."
EXPIRY_ALERT_HEADER = "⌛️Внимание! Истекает виза пользователя:\n"

ADMIN_ADDED_TEMPLATE = "Администратор успешно добавлен!\nID: {admin_id}\nUsername: {username}"
ADMIN_ADD_FAILED = (
    "Произошла ошибка при добавлении администратора. Пожалуйста, попробуйте позже."
)
ADMIN_REMOVED_TEMPLATE = "Администратор успешно удален!\nID: {admin_id}"
ADMIN_NOT_FOUND = "Администратор с таким ID не найден."
ADMIN_REMOVE_FAILED = "Произошла ошибка при удалении администратора. Пожалуйста, попробуйте позже."
ADMIN_LIST_HEADER = "Список администраторов:\n\n"
ADMIN_LIST_EMPTY = "Список администраторов пуст."
ADMIN_LIST_FAILED = (
    "Произошла ошибка при получении списка администраторов. Пожалуйста, попробуйте позже."
)

GENERIC_ERROR = "Произошла ошибка. Пожалуйста, попробуйте позже."

RECORD_LABELS = {
    "phone": "Телефон",
    "first_name": "Имя",
    "last_name": "Фамилия",
    "passport": "Паспорт",
    "visa_expiry": "Срок визы",
    "expires": "Истекает",
    "created_at": "Дата добавления",
    "admin_added": "Добавлен",
}

MONTHS_GENITIVE = (
    "января",
    "февраля",
    "марта",
    "апреля",
    "мая",
    "июня",
    "июля",
    "августа",
    "сентября",
    "октября",
    "ноября",
    "декабря",
)

__all__ = [
    "WELCOME_MESSAGE",
    "ADMIN_WELCOME_MESSAGE",
    "CHOOSE_ACTION",
    "MAIN_MENU_TITLE",
    "MENU_LABELS",
    "ADMIN_MENU_LABELS",
    "ADMIN_MANAGEMENT_LABELS",
    "SHARE_PHONE_BUTTON",
    "ALL_DATA_BUTTON",
    "USER_PROMPTS",
    "ADMIN_PROMPTS",
    "VALIDATION_MESSAGES",
    "RECORD_LABELS",
    "MONTHS_GENITIVE",
]
