from fizzbuzz.cli import main

raise SystemExit(main())
