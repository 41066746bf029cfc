# packsizer

A small JSON HTTP API, built on Flask, that keeps a list of available pack
sizes in MongoDB and, for any order amount, works out which packs to ship.

The calculation follows two rules, in this order:

1. Ship the smallest total number of items that covers the order.
2. Among the ways of reaching that total, use as few packs as possible.

With pack sizes 250, 500, 1000, 2000 and 5000, an order of 12001 items is
served by two packs of 5000, one of 2000 and one of 250: 12250 items in
4 packs, 249 more than ordered.

## Running

Start the server with:

    packsizer

The command takes no options besides `--help`. It reads a `.env` file from
the working directory, connects to MongoDB and pings it; if the database
cannot be reached it logs the error and exits with status 1. Otherwise it
serves on all interfaces.

| Variable          | Meaning                                      | Default |
|-------------------|----------------------------------------------|---------|
| `SV_PORT`         | Port to listen on                            | `3000`  |
| `DB_URL`          | MongoDB connection string                    | (none)  |
| `SV_SERVICE_NAME` | Logger name and service name in log records  | `api`   |
| `LOG_LEVEL`       | Log level (`debug`, `info`, `warn`, `error`) | `info`  |
| `LOG_JSON`        | Write log records as JSON (`true`/`false`)   | `false` |

A local setup might use `DB_URL=mongodb://localhost:27017`. Pack sizes are
kept in the `packaging` collection of the `re-tech-challenge` database.

## API

Every response carries an `X-Cid` header holding a fresh correlation id.
Requests that send a body must use `Content-Type: application/json`,
otherwise they are answered with `415`. Cross-origin requests are allowed
from any origin.

| Method   | Path                         | Result                                     |
|----------|------------------------------|--------------------------------------------|
| `POST`   | `/packaging`                 | `201` with the new pack size               |
| `GET`    | `/packaging`                 | `200` with every pack size not deleted     |
| `GET`    | `/packaging/amount/{amount}` | `200` with the packs for `amount` items    |
| `DELETE` | `/packaging/{id}`            | `204`; the pack size is soft-deleted       |
| `GET`    | `/health`                    | `200` with the text `Ok`                   |
| `GET`    | `/swagger`                   | The file `static/swagger.yaml`             |
| `GET`    | `/...`                       | Files from `static/swagger-ui`             |

The `static` directory is looked for in the working directory (or in
`/usr/local/bin` when the working directory is `/`).

Creating a pack size takes a body such as:

    {"size": 250}

and answers with:

    {"id": "<generated id>", "size": 250}

Asking for `/packaging/amount/12001` with the sizes above answers with:

    {
      "packs": [
        {"size": 5000, "quantity": 2},
        {"size": 2000, "quantity": 1},
        {"size": 250, "quantity": 1}
      ],
      "packQuantity": 4,
      "totalAmount": 12250,
      "leftAmount": 249
    }

Entries in `packs` are listed from the largest size to the smallest. An
amount of zero or less gives an empty list and a total of 0.

Errors come back as `{"message": "..."}` with a matching status, for example:

- `400` `Invalid amount` when `{amount}` is not a whole number;
- `400` `No packagings available` when no pack sizes are stored;
- `404` `Packaging not found` when deleting an unknown id;
- `500` `Invalid ID format` when the id is not a valid object id;
- `500` `Error parsing request` when the body is not valid JSON of the
  expected shape.

## Using it from Python

The pieces can be wired up directly:

    from packsizer.repository import (
        PACKAGING_COLLECTION,
        MongoClientProvider,
        MongoPackagingRepository,
    )
    from packsizer.server import build_controllers, create_app

    collection = MongoClientProvider("mongodb://localhost:27017").get_collection(
        PACKAGING_COLLECTION
    )
    app = create_app(build_controllers(MongoPackagingRepository(collection)), "static")

`build_controllers` accepts any object with the methods of
`packsizer.usecases.PackagingRepository` (`create`, `delete_by_id`,
`get_all`, `get_all_sorted_by_size`), so the API can run against another
store.

The pack calculation on its own is `packsizer.usecases.get_best_combo`,
which takes an amount and a list of pack sizes and returns the total
shipped together with a mapping of size to quantity:

    >>> from packsizer.usecases import get_best_combo
    >>> get_best_combo(501, [5000, 2000, 1000, 500, 250])
    (750, {250: 1, 500: 1})

It raises `ValueError` when no positive pack size is given.
`GetPacksForAmount(repository).get_for_amount(amount)` wraps it, reading
the sizes from the repository and returning a
`packsizer.models.GetForAmountResponse`.

Errors raised by the use cases and the repository are
`packsizer.errors.CustomError`, carrying `status`, `message` and
`original_error`.