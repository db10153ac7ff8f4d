from ledgerline_chart.cli import main

raise SystemExit(main())
