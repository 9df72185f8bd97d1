# Ids carried in the JWT payload; accounts live in the identity service
ORGANIZER_ID = 1
BUYER_ID = 2
ANOTHER_BUYER_ID = 3
ADMIN_ID = 4
ANOTHER_ORGANIZER_ID = 5

DEFAULT_TICKET_PRICE = '20.00'
DEFAULT_TOTAL_TICKETS = 10
