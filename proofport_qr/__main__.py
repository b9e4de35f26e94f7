from proofport_qr.cli import main

main()
