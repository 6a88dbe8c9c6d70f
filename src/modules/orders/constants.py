"""Order domain constants.

Limits mirror the storefront checkout form; the API validates against
them before the service layer ever sees a request.
"""

MAX_ORDER_QUANTITY = 1000

CUSTOMER_NAME_MAX_LENGTH = 255
CUSTOMER_EMAIL_MAX_LENGTH = 255
CUSTOMER_PHONE_MAX_LENGTH = 50
CUSTOMER_ADDRESS_MAX_LENGTH = 255
CUSTOMER_CITY_MAX_LENGTH = 100
CUSTOMER_COUNTRY_MAX_LENGTH = 100
CUSTOMER_ZIP_CODE_MAX_LENGTH = 20
